"""
paver/utils/terraform/cmd.py

Runs the terraform binary as a subprocess on behalf of the executor.

The runner keeps a "latest error" record: an in-memory buffer holding all of the
engine output from the most recent run. Non-debug runs write only to that record,
so nothing (secrets included) reaches the terminal; operators can look at the
record afterwards, e.g. through a `bbl latest-error` command.
"""

from __future__ import annotations

import io
import sys
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TextIO

from paver.models.settings import ExecutorSettings
from paver.models.terraform import EnvOverride
from paver.utils.async_command_runner import run_command

logger = logging.getLogger(__name__)


class TerraformRunner(ABC):
    """Abstract interface for running terraform subcommands."""

    async def run(
        self,
        stdout: TextIO,
        working_dir: str,
        args: List[str],
        debug: bool,
    ) -> None:
        """Run `terraform <args>` in `working_dir` with no extra environment.

        Args:
            stdout (TextIO): Sink for the engine's stdout.
            working_dir (str): Working directory of the subprocess.
            args (List[str]): Subcommand and flags.
            debug (bool): If True, stream output and keep error details.

        Raises:
            CommandError: If terraform exits non-zero or cannot be started.
        """
        await self.run_with_env(stdout, working_dir, args, [], debug)

    @abstractmethod
    async def run_with_env(
        self,
        stdout: TextIO,
        working_dir: str,
        args: List[str],
        envs: Sequence[EnvOverride],
        debug: bool,
    ) -> None:
        """Run `terraform <args>` with additional environment overrides.

        Args:
            stdout (TextIO): Sink for the engine's stdout.
            working_dir (str): Working directory of the subprocess.
            args (List[str]): Subcommand and flags.
            envs (Sequence[EnvOverride]): Extra environment variables.
            debug (bool): If True, stream output and keep error details.

        Raises:
            CommandError: If terraform exits non-zero or cannot be started.
        """
        pass


class TerraformCmd(TerraformRunner):
    """Runs the real terraform binary via `run_command`."""

    def __init__(
        self,
        terraform_binary: str = "terraform",
        stderr: Optional[TextIO] = None,
    ) -> None:
        """
        Initialize a TerraformCmd.

        Args:
            terraform_binary (str):
                Name or path of the terraform executable.
            stderr (Optional[TextIO]):
                Where stderr goes in debug mode. Defaults to sys.stderr at call time.
        """
        self.terraform_binary = terraform_binary
        self._stderr = stderr
        self._latest = io.StringIO()

    @classmethod
    def from_settings(
        cls, settings: ExecutorSettings, stderr: Optional[TextIO] = None
    ) -> TerraformCmd:
        """Build a TerraformCmd running `settings.terraform_binary`."""
        return cls(terraform_binary=settings.terraform_binary, stderr=stderr)

    def latest_output(self) -> str:
        """Return everything the engine printed during the most recent run."""
        return self._latest.getvalue()

    async def run_with_env(
        self,
        stdout: TextIO,
        working_dir: str,
        args: List[str],
        envs: Sequence[EnvOverride],
        debug: bool,
    ) -> None:
        self._latest = io.StringIO()

        if debug:
            stdout_sinks: List[TextIO] = [stdout, self._latest]
            stderr_sinks: List[TextIO] = [self._stderr or sys.stderr, self._latest]
        else:
            stdout_sinks = [self._latest]
            stderr_sinks = [self._latest]

        subcommand = args[0] if args else ""
        logger.debug("Running terraform %s in %s", subcommand, working_dir)

        await run_command(
            [self.terraform_binary, *args],
            sensitive=not debug,
            env={env.key: env.value for env in envs},
            cwd=working_dir,
            stdout_sinks=stdout_sinks,
            stderr_sinks=stderr_sinks,
        )
