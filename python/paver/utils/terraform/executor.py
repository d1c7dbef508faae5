"""
paver/utils/terraform/executor.py

Drives terraform for a single environment whose files live in a StateStore:

  - setup: write the template, the .terraform/.gitignore marker and bbl.tfvars
  - init / apply / destroy: run terraform against the working directory
  - version / output / outputs / is_paved: run terraform and interpret stdout

Paths are resolved from the StateStore on every call, and the existence of
terraform.tfstate is checked on every call, because terraform (and other
tools) rewrite both directories between calls.

Failures of apply and destroy are redacted unless debug is on, since their
output can contain credentials passed as -var flags. The other commands wrap
the runner's error with a command-specific prefix. See REDACTED_COMMANDS.
"""

from __future__ import annotations

import io
import os
import sys
import logging
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, TextIO

from pydantic import ValidationError

from paver.models.settings import ExecutorSettings
from paver.models.terraform import EnvOverride, TfVarValue, decode_outputs
from paver.utils.fileio import FileIO
from paver.utils.terraform.cmd import TerraformRunner
from paver.utils.terraform.errors import (
    ExecutorError,
    RedactedError,
    TerraformParseError,
)
from paver.utils.terraform.parsing import is_no_state, parse_version, strip_one_newline
from paver.utils.terraform.state_store import StateStore
from paver.utils.terraform.vars import format_vars

logger = logging.getLogger(__name__)

# Subcommands whose failures are replaced by RedactedError when debug is off.
REDACTED_COMMANDS: FrozenSet[str] = frozenset({"apply", "destroy"})

DESTROY_ENV: Sequence[EnvOverride] = (EnvOverride("TF_WARN_OUTPUT_ERRORS", "1"),)

GITIGNORE_CONTENT = "*\n"


class Executor:
    """Runs terraform for one StateStore.

    Attributes:
        cmd (TerraformRunner): Runs terraform subcommands.
        state_store (StateStore): Supplies the terraform and vars directories.
        fs (FileIO): Filesystem operations.
        settings (ExecutorSettings): File names, modes and the debug flag.
    """

    def __init__(
        self,
        cmd: TerraformRunner,
        state_store: StateStore,
        fs: Optional[FileIO] = None,
        settings: Optional[ExecutorSettings] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        """
        Initialize an Executor.

        Args:
            cmd (TerraformRunner):
                The process runner.
            state_store (StateStore):
                Source of the terraform and vars directories.
            fs (Optional[FileIO]):
                Filesystem implementation. Defaults to local disk.
            settings (Optional[ExecutorSettings]):
                Defaults to ExecutorSettings().
            stdout (Optional[TextIO]):
                Sink for streamed terraform output. Defaults to sys.stdout at call time.
        """
        self.cmd = cmd
        self.state_store = state_store
        self.fs = fs or FileIO()
        self.settings = settings or ExecutorSettings()
        self._stdout = stdout

    @property
    def debug(self) -> bool:
        return self.settings.debug

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    # ------------------------------------------------------------------ setup

    async def setup(self, template: str, inputs: Mapping[str, TfVarValue]) -> None:
        """Write the template, the housekeeping ignore marker and bbl.tfvars.

        Safe to call repeatedly; every file is overwritten. Nothing is rolled back
        on failure.

        Args:
            template (str): Terraform template text.
            inputs (Mapping[str, TfVarValue]): Variable name -> string or list of strings.

        Raises:
            ExecutorError: If a directory or file could not be written.
        """
        terraform_dir = self.state_store.get_terraform_dir()
        mode = self.settings.file_mode
        logger.debug("Writing terraform template to %s", terraform_dir)

        try:
            await self.fs.write_file(
                os.path.join(terraform_dir, self.settings.template_filename),
                template,
                mode,
            )
        except OSError as err:
            raise ExecutorError(f"Write terraform template: {err}") from err

        vars_dir = self.state_store.get_vars_dir()

        dot_terraform = os.path.join(terraform_dir, ".terraform")
        try:
            await self.fs.makedirs(dot_terraform)
        except OSError as err:
            raise ExecutorError(f"Create .terraform directory: {err}") from err

        try:
            await self.fs.write_file(
                os.path.join(dot_terraform, ".gitignore"), GITIGNORE_CONTENT, mode
            )
        except OSError as err:
            raise ExecutorError(
                f"Write .gitignore for terraform binaries: {err}"
            ) from err

        logger.debug("Writing %d terraform vars to %s", len(inputs), vars_dir)
        try:
            await self.fs.write_file(
                os.path.join(vars_dir, self.settings.vars_filename),
                format_vars(inputs),
                mode,
            )
        except OSError as err:
            raise ExecutorError(f"Write terraform vars: {err}") from err

    # ------------------------------------------------------- argument assembly

    def _state_path(self, vars_dir: str) -> str:
        return os.path.join(vars_dir, self.settings.state_filename)

    def _state_args(self, vars_dir: str, terraform_dir: str) -> List[str]:
        """['-state', <state file relative to terraform_dir>]."""
        return ["-state", os.path.relpath(self._state_path(vars_dir), terraform_dir)]

    async def _existing_state_args(self, vars_dir: str, terraform_dir: str) -> List[str]:
        """Like _state_args, but empty when terraform.tfstate does not exist yet."""
        if not await self.fs.exists(self._state_path(vars_dir)):
            return []
        return self._state_args(vars_dir, terraform_dir)

    async def _var_file_args(self, vars_dir: str, terraform_dir: str) -> List[str]:
        """One '-var-file <relative path>' pair per .tfvars file in vars_dir."""
        try:
            names = await self.fs.read_dir(vars_dir)
        except OSError as err:
            raise ExecutorError(f"Read contents of vars directory: {err}") from err

        args: List[str] = []
        for name in names:
            if name.endswith(self.settings.vars_extension):
                relative = os.path.relpath(os.path.join(vars_dir, name), terraform_dir)
                args.extend(["-var-file", relative])
        return args

    async def _state_and_var_args(self, vars_dir: str, terraform_dir: str) -> List[str]:
        var_file_args = await self._var_file_args(vars_dir, terraform_dir)
        return self._state_args(vars_dir, terraform_dir) + var_file_args

    @staticmethod
    def _credential_args(credentials: Mapping[str, str]) -> List[str]:
        args: List[str] = []
        for key, value in credentials.items():
            args.extend(["-var", f"{key}={value}"])
        return args

    def _failure(self, subcommand: str, prefix: str, err: Exception) -> Exception:
        """Map a runner failure to the exception the caller sees."""
        if subcommand in REDACTED_COMMANDS:
            if self.debug:
                return err
            logger.warning(
                "terraform %s failed (return code %s); output redacted",
                subcommand,
                getattr(err, "return_code", None),
            )
            return RedactedError()
        return ExecutorError(f"{prefix}: {err}")

    async def _run_tf_command(
        self, args: List[str], envs: Sequence[EnvOverride] = ()
    ) -> None:
        vars_dir = self.state_store.get_vars_dir()
        terraform_dir = self.state_store.get_terraform_dir()

        full_args = args + await self._state_and_var_args(vars_dir, terraform_dir)

        subcommand = args[0]
        try:
            await self.cmd.run_with_env(
                self.stdout, terraform_dir, full_args, list(envs), self.debug
            )
        except Exception as err:
            failure = self._failure(subcommand, f"Run terraform {subcommand}", err)
            if failure is err:
                raise
            if isinstance(failure, RedactedError):
                raise failure from None
            raise failure from err

    # --------------------------------------------------------------- commands

    async def init(self) -> None:
        """Run 'terraform init' in the terraform directory.

        Raises:
            ExecutorError: If terraform init fails.
        """
        terraform_dir = self.state_store.get_terraform_dir()
        await self._init_in(terraform_dir, "Run terraform init", self.debug)

    async def _init_in(self, terraform_dir: str, prefix: str, debug: bool) -> None:
        try:
            await self.cmd.run(self.stdout, terraform_dir, ["init"], debug)
        except Exception as err:
            raise ExecutorError(f"{prefix}: {err}") from err

    async def apply(self, credentials: Mapping[str, str]) -> None:
        """Run 'terraform apply --auto-approve' with credentials as -var flags.

        Args:
            credentials (Mapping[str, str]): Passed inline, never written to disk.

        Raises:
            RedactedError: On failure when debug is off.
            ExecutorError: If the vars directory cannot be read.
        """
        args = ["apply", "--auto-approve"] + self._credential_args(credentials)
        await self._run_tf_command(args)

    async def destroy(self, credentials: Mapping[str, str]) -> None:
        """Run 'terraform destroy -force', continuing past output errors.

        Args:
            credentials (Mapping[str, str]): Passed inline, never written to disk.

        Raises:
            RedactedError: On failure when debug is off.
            ExecutorError: If the vars directory cannot be read.
        """
        args = ["destroy", "-force"] + self._credential_args(credentials)
        await self._run_tf_command(args, DESTROY_ENV)

    async def version(self) -> str:
        """Return the installed terraform version, e.g. "0.11.7".

        Raises:
            ExecutorError: If terraform version fails.
            TerraformParseError: If no version number is in its output.
        """
        buffer = io.StringIO()
        try:
            await self.cmd.run(buffer, self.settings.version_dir, ["version"], True)
        except Exception as err:
            raise ExecutorError(f"Run terraform version: {err}") from err
        return parse_version(buffer.getvalue())

    async def output(self, output_name: str) -> str:
        """Return one terraform output, minus a single trailing newline."""
        terraform_dir = self.state_store.get_terraform_dir()
        vars_dir = self.state_store.get_vars_dir()

        await self._init_in(
            terraform_dir, "Run terraform init in terraform dir", self.debug
        )

        args = ["output", output_name] + await self._existing_state_args(
            vars_dir, terraform_dir
        )
        buffer = io.StringIO()
        try:
            await self.cmd.run(buffer, terraform_dir, args, True)
        except Exception as err:
            raise ExecutorError(f"Run terraform output -state: {err}") from err

        return strip_one_newline(buffer.getvalue())

    async def outputs(self) -> Dict[str, Any]:
        """Return every terraform output as name -> value.

        The sensitive flag and type reported by terraform are dropped.

        Raises:
            ExecutorError: If terraform init or output fails.
            TerraformParseError: If the JSON cannot be decoded.
        """
        terraform_dir = self.state_store.get_terraform_dir()
        vars_dir = self.state_store.get_vars_dir()

        await self._init_in(
            terraform_dir, "Run terraform init in terraform dir", False
        )

        args = ["output", "--json"] + await self._existing_state_args(
            vars_dir, terraform_dir
        )
        buffer = io.StringIO()
        try:
            await self.cmd.run(buffer, terraform_dir, args, True)
        except Exception as err:
            raise ExecutorError(
                f"Run terraform output --json in vars dir: {err}"
            ) from err

        try:
            decoded = decode_outputs(buffer.getvalue())
        except ValidationError as err:
            raise TerraformParseError(f"Unmarshal terraform output: {err}") from err

        return {name: entry.value for name, entry in decoded.items()}

    async def is_paved(self) -> bool:
        """Return False if terraform reports "No state.", True otherwise.

        Raises:
            ExecutorError: If terraform init or show fails.
        """
        terraform_dir = self.state_store.get_terraform_dir()

        await self._init_in(
            terraform_dir, "Run terraform init in terraform dir", False
        )

        vars_dir = self.state_store.get_vars_dir()

        args = ["show"] + await self._existing_state_args(vars_dir, terraform_dir)
        buffer = io.StringIO()
        try:
            await self.cmd.run(buffer, terraform_dir, args, True)
        except Exception as err:
            raise ExecutorError(f"Run terraform show: {err}") from err

        return not is_no_state(buffer.getvalue())
