"""
Shared fixtures: a recording TerraformRunner and a StateStore backed by tmp_path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TextIO

import pytest

from paver.models.settings import ExecutorSettings
from paver.models.terraform import EnvOverride
from paver.utils.async_command_runner import CommandError
from paver.utils.terraform.cmd import TerraformRunner
from paver.utils.terraform.executor import Executor
from paver.utils.terraform.state_store import StateStore


class Call:
    def __init__(
        self,
        working_dir: str,
        args: List[str],
        envs: Sequence[EnvOverride],
        debug: bool,
    ) -> None:
        self.working_dir = working_dir
        self.args = args
        self.envs = list(envs)
        self.debug = debug

    @property
    def subcommand(self) -> str:
        return self.args[0]


class FakeRunner(TerraformRunner):
    """Records every call; prints canned stdout or raises per subcommand."""

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self.stdout_for: Dict[str, str] = {}
        self.errors: Dict[str, Exception] = {}
        self.on_call: Optional[Callable[[Call], None]] = None

    def fail(self, subcommand: str, message: str, return_code: int = 1) -> None:
        self.errors[subcommand] = CommandError(message, return_code)

    async def run_with_env(
        self,
        stdout: TextIO,
        working_dir: str,
        args: List[str],
        envs: Sequence[EnvOverride],
        debug: bool,
    ) -> None:
        call = Call(working_dir, list(args), envs, debug)
        self.calls.append(call)
        if self.on_call is not None:
            self.on_call(call)
        if call.subcommand in self.errors:
            raise self.errors[call.subcommand]
        stdout.write(self.stdout_for.get(call.subcommand, ""))

    def last(self, subcommand: str) -> Call:
        return [c for c in self.calls if c.subcommand == subcommand][-1]


class FakeStateStore(StateStore):
    def __init__(self, root: Path) -> None:
        self.terraform_dir = root / "terraform"
        self.vars_dir = root / "vars"
        self.terraform_dir.mkdir()
        self.vars_dir.mkdir()
        self.terraform_dir_error: Optional[Exception] = None
        self.vars_dir_error: Optional[Exception] = None

    def get_terraform_dir(self) -> str:
        if self.terraform_dir_error is not None:
            raise self.terraform_dir_error
        return str(self.terraform_dir)

    def get_vars_dir(self) -> str:
        if self.vars_dir_error is not None:
            raise self.vars_dir_error
        return str(self.vars_dir)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def state_store(tmp_path: Path) -> FakeStateStore:
    return FakeStateStore(tmp_path)


@pytest.fixture
def make_executor(runner: FakeRunner, state_store: FakeStateStore):
    """Build an Executor around the fakes; keyword args go to ExecutorSettings."""

    def _make(**settings) -> Executor:
        return Executor(runner, state_store, settings=ExecutorSettings(**settings))

    return _make
