"""
paver/utils/terraform/parsing.py

Pure text helpers for interpreting Terraform's stdout. None of these touch the
filesystem or run processes.
"""

from __future__ import annotations

import re

from paver.utils.terraform.errors import TerraformParseError

NO_STATE = "No state."

_VERSION_RE = re.compile(r"\d+\.\d+\.\d+")


def parse_version(text: str) -> str:
    """Return the first 'X.Y.Z' found in the output of 'terraform version'.

    Args:
        text (str): Captured stdout, e.g. "Terraform v0.11.7\\n".

    Returns:
        str: The version, e.g. "0.11.7".

    Raises:
        TerraformParseError: If no version-shaped substring is present.
    """
    match = _VERSION_RE.search(text)
    if match is None:
        raise TerraformParseError("Terraform version could not be parsed")
    return match.group(0)


def strip_one_newline(text: str) -> str:
    """Drop exactly one trailing '\\n', if there is one."""
    return text[:-1] if text.endswith("\n") else text


def is_no_state(text: str) -> bool:
    """True only when 'terraform show' printed exactly "No state."."""
    return text == NO_STATE
