"""
paver/utils/terraform/vars.py

Renders input variables into Terraform's .tfvars syntax:

    name="value"
    names=["a","b"]

Newlines inside a string value are written as the two characters '\\n' so every
assignment stays on one physical line.
"""

from __future__ import annotations

from typing import Any, Mapping


def format_value(value: Any) -> str:
    """Render a single variable value.

    Args:
        value (Any): A string, a list of strings, or any other scalar
            (rendered with str()).

    Returns:
        str: The right-hand side of a tfvars assignment.
    """
    if isinstance(value, str):
        return '"{}"'.format(value).replace("\n", "\\n")
    if isinstance(value, (list, tuple)):
        return '["{}"]'.format('","'.join(value))
    return str(value)


def format_var(name: str, value: Any) -> str:
    """Render one `name=value` line (without the line break)."""
    return f"{name}={format_value(value)}"


def format_vars(inputs: Mapping[str, Any]) -> str:
    """Render a whole mapping, each assignment preceded by a newline.

    Args:
        inputs (Mapping[str, Any]): Variable name -> value.

    Returns:
        str: The tfvars file content. Empty for an empty mapping.
    """
    return "".join(f"\n{format_var(name, value)}" for name, value in inputs.items())
