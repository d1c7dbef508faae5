"""
paver/models/terraform.py

Defines Pydantic models related to Terraform, including:
 - OutputValue: One entry of 'terraform output --json'.
 - EnvOverride: A single KEY=value environment override for a Terraform run.
 - TfVarValue: The value types accepted for Terraform input variables.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union
from typing_extensions import TypeAlias
from pydantic import BaseModel, TypeAdapter, field_validator

TfVarValue: TypeAlias = Union[str, List[str]]


class OutputValue(BaseModel):
    """Represents a Terraform output value as parsed from 'terraform output --json'.

    Attributes:
        sensitive: True if the output is marked sensitive.
        value: Arbitrary data from the Terraform output.
        type: Optional Terraform type hint (string, list, etc.).
    """

    sensitive: bool = False
    value: Any = None
    type: Union[str, List[Any], None] = None


_OUTPUTS_ADAPTER: TypeAdapter[Dict[str, OutputValue]] = TypeAdapter(
    Dict[str, OutputValue]
)


def decode_outputs(raw: str) -> Dict[str, OutputValue]:
    """Decode the JSON object printed by 'terraform output --json'.

    Args:
        raw (str): The captured stdout of the command.

    Returns:
        Dict[str, OutputValue]: Output name -> decoded entry.

    Raises:
        pydantic.ValidationError: If the text is not valid JSON or not an object
            of output entries.
    """
    return _OUTPUTS_ADAPTER.validate_json(raw)


class EnvOverride(BaseModel):
    """One environment variable override passed to a Terraform run.

    Attributes:
        key (str): Variable name, no '=' allowed.
        value (str): Variable value.
    """

    key: str
    value: str

    def __init__(__pydantic_self__, key: str, value: str, **data: Any) -> None:
        super().__init__(key=key, value=value, **data)

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        """Check that `key` is non-empty and contains no '='."""
        if not value or "=" in value:
            raise ValueError("Environment key must be non-empty and contain no '='.")
        return value
