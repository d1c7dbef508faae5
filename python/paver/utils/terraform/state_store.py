"""
paver/utils/terraform/state_store.py

Defines where the executor keeps its files:
  - StateStore: abstract source of the terraform and vars directories
  - LocalStateStore: both directories under one local state directory

The terraform directory holds the generated template and terraform's own
housekeeping files and is the working directory of every run. The vars
directory holds the .tfvars files and terraform.tfstate.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod


class StateStoreError(Exception):
    """A state directory could not be resolved or created."""


class StateStore(ABC):
    """Abstract base class supplying the executor's directories."""

    @abstractmethod
    def get_terraform_dir(self) -> str:
        """
        Return the terraform working directory.

        Returns:
            str: An existing directory path.
        """
        pass

    @abstractmethod
    def get_vars_dir(self) -> str:
        """
        Return the directory holding .tfvars files and the state file.

        Returns:
            str: An existing directory path.
        """
        pass


class LocalStateStore(StateStore):
    """
    Keeps both directories under a single local state directory:
      '<state_dir>/terraform' and '<state_dir>/vars'.

    Directories are created on first use, and re-created if they were removed
    between calls.
    """

    def __init__(self, state_dir: str) -> None:
        self.state_dir = state_dir

    def _ensure(self, name: str) -> str:
        path = os.path.join(self.state_dir, name)
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as ex:
            raise StateStoreError(f"Get {name} dir: {ex}") from ex
        return path

    def get_terraform_dir(self) -> str:
        return self._ensure("terraform")

    def get_vars_dir(self) -> str:
        return self._ensure("vars")
