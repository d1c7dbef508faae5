"""
paver/utils/terraform/errors.py

Exceptions raised by the Terraform executor. State store failures are not
wrapped and keep their own types.
"""

from __future__ import annotations

REDACTED_MESSAGE = (
    "Some output has been redacted, use `bbl latest-error` to see it "
    "or run again with --debug for additional debug output"
)


class ExecutorError(Exception):
    """A Terraform executor step failed (filesystem write, directory read, or run)."""


class TerraformParseError(ExecutorError):
    """Terraform ran successfully but its output could not be interpreted."""


class RedactedError(ExecutorError):
    """A Terraform run failed and its details were withheld.

    The message is always REDACTED_MESSAGE; the engine output can be read from
    the runner's latest-error record instead.
    """

    def __init__(self) -> None:
        super().__init__(REDACTED_MESSAGE)
