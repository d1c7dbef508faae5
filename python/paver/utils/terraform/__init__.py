"""
paver/utils/terraform/__init__.py

Provides a convenient import interface for the Terraform submodules:

- executor.py for the Executor (setup, init, apply, destroy, outputs, ...)
- cmd.py for the process runner
- state_store.py for the terraform/vars directory source
- vars.py and parsing.py for the pure text helpers
"""

from paver.utils.terraform.cmd import TerraformRunner, TerraformCmd
from paver.utils.terraform.errors import (
    REDACTED_MESSAGE,
    ExecutorError,
    RedactedError,
    TerraformParseError,
)
from paver.utils.terraform.executor import Executor, REDACTED_COMMANDS
from paver.utils.terraform.parsing import parse_version
from paver.utils.terraform.state_store import (
    StateStore,
    LocalStateStore,
    StateStoreError,
)
from paver.utils.terraform.vars import format_vars

__all__ = [
    "TerraformRunner",
    "TerraformCmd",
    "REDACTED_MESSAGE",
    "ExecutorError",
    "RedactedError",
    "TerraformParseError",
    "Executor",
    "REDACTED_COMMANDS",
    "parse_version",
    "StateStore",
    "LocalStateStore",
    "StateStoreError",
    "format_vars",
]
