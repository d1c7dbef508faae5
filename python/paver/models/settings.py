from __future__ import annotations

import tempfile

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExecutorSettings(BaseSettings):
    """
    Settings for the Terraform executor.
    Fields map to environment variables prefixed with `PAVER_`,
    e.g. `PAVER_DEBUG=1` or `PAVER_TERRAFORM_BINARY=/usr/local/bin/terraform`.
    """

    model_config = SettingsConfigDict(env_prefix="PAVER_")

    terraform_binary: str = "terraform"
    debug: bool = False
    version_dir: str = Field(default_factory=tempfile.gettempdir)
    template_filename: str = "bbl-template.tf"
    vars_filename: str = "bbl.tfvars"
    state_filename: str = "terraform.tfstate"
    vars_extension: str = ".tfvars"
    file_mode: int = 0o644

    @field_validator(
        "terraform_binary", "template_filename", "vars_filename", "state_filename"
    )
    @classmethod
    def check_not_empty(cls, value: str) -> str:
        """Reject empty binary and file names."""
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("vars_extension")
    @classmethod
    def check_extension(cls, value: str) -> str:
        """The vars extension must look like '.ext'."""
        if not value.startswith(".") or len(value) < 2:
            raise ValueError("vars_extension must start with '.'")
        return value
