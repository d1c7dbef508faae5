"""
paver/utils/async_command_runner.py

Provides a reusable asynchronous command runner. Output of the child process is
streamed, chunk by chunk, into optional text sinks while it runs, and stdout is
also captured and returned to the caller.

We also keep an optional argument for `successful_return_codes`, which indicates
which return codes won't be treated as errors (defaults to [0]).

Usage example:
    import sys
    from paver.utils.async_command_runner import run_command, CommandError

    try:
        output = await run_command(
            ["terraform", "version"],
            stdout_sinks=[sys.stdout],
        )
    except CommandError as err:
        print(f"Command failed: {err}")
"""

from __future__ import annotations

import os
import codecs
import asyncio
from typing import Dict, List, Optional, Sequence, TextIO

_CHUNK_SIZE = 4096


class CommandError(Exception):
    """Represents a failure when executing a shell command.

    Attributes:
        message (str): The error message describing the command failure.
        return_code (Optional[int]): The exit code if available.
    """

    def __init__(self, message: str, return_code: Optional[int] = None) -> None:
        """
        Initialize a CommandError.

        Args:
            message (str): The error message describing the command failure.
            return_code (Optional[int]): The exit code if known.
        """
        super().__init__(message)
        self.return_code = return_code


async def _pump(
    stream: Optional[asyncio.StreamReader], sinks: Sequence[TextIO]
) -> str:
    """Read `stream` to EOF, copying every decoded chunk into each sink."""
    if stream is None:
        return ""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    chunks: List[str] = []
    while True:
        data = await stream.read(_CHUNK_SIZE)
        text = decoder.decode(data, final=not data)
        if text:
            chunks.append(text)
            for sink in sinks:
                sink.write(text)
        if not data:
            break
    return "".join(chunks)


async def run_command(
    command: List[str],
    *,
    sensitive: bool = True,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
    stdout_sinks: Sequence[TextIO] = (),
    stderr_sinks: Sequence[TextIO] = (),
    successful_return_codes: Sequence[int] = (0,),
) -> str:
    """
    Executes a local command in a subprocess, asynchronously.

    Stdout and stderr are read concurrently; each chunk is written to every sink
    in `stdout_sinks` / `stderr_sinks` as soon as it arrives. The full, unstripped
    stdout is returned once the process exits.

    When `sensitive=True`, we omit the command and stderr from the raised error
    message.

    Args:
        command (List[str]):
            The command and arguments to execute.
        sensitive (bool):
            If True, hides command details in the raised error.
        env (Optional[Dict[str, str]]):
            Additional environment variables to add or override.
        cwd (Optional[str]):
            Working directory for the command.
        stdout_sinks (Sequence[TextIO]):
            Text streams receiving stdout while the command runs.
        stderr_sinks (Sequence[TextIO]):
            Text streams receiving stderr while the command runs.
        successful_return_codes (Sequence[int]):
            Which return codes won't be treated as errors. Defaults to (0,).

    Returns:
        str: The captured stdout of the command on success.

    Raises:
        CommandError: If the command cannot be started or returns a code not in
            `successful_return_codes`.
    """
    proc_env = None
    if env:
        proc_env = os.environ.copy()
        proc_env.update(env)

    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=proc_env,
            cwd=cwd,
        )
    except OSError as exc:
        detail = "" if sensitive else f"\nCommand: {' '.join(command)}"
        raise CommandError(f"Command could not be started: {exc}.{detail}") from exc

    stdout_str, stderr_str = await asyncio.gather(
        _pump(proc.stdout, stdout_sinks),
        _pump(proc.stderr, stderr_sinks),
    )
    await proc.wait()

    if proc.returncode not in successful_return_codes:
        detail = ""
        if not sensitive:
            detail = (
                f"\nCommand: {' '.join(command)}"
                f"\nStderr: {stderr_str.strip()}"
            )

        raise CommandError(
            f"Command failed with return code {proc.returncode}.{detail}",
            proc.returncode,
        )

    return stdout_str
