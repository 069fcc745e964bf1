# =============================================================================
# External Command Runner
# =============================================================================
# Runs external programs (gh, git) as asyncio subprocesses.
#
# Key responsibilities:
#   - Spawning a process with arguments and an environment
#   - Capturing the complete stdout / stderr and the exit status
#   - Killing processes that exceed the configured timeout
#   - Building the PATH-augmented environment used for gh
#
# Design notes:
#   - Subprocesses run on the event loop's child watcher, so the UI never
#     blocks while a command executes
#   - One invocation per call; retry policy belongs to the caller
#   - Exit codes are returned, not raised; only launch failures and
#     timeouts are exceptions
# =============================================================================

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from gh_switcher.config import DEFAULT_EXTRA_PATH


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    """
    Captured result of a finished command.

    Attributes:
        stdout: Everything the process wrote to stdout.
        stderr: Everything the process wrote to stderr.
        exit_code: Process exit status.
    """
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def command_environment(
    base: dict[str, str] | None = None,
    extra_path: str = DEFAULT_EXTRA_PATH,
) -> dict[str, str]:
    """
    Build the environment for running gh.

    Copies `base` (the process environment by default) and appends
    `extra_path` to PATH, or uses `extra_path` alone if PATH is empty.

    Args:
        base: Environment to start from.
        extra_path: Colon-separated directories to append.

    Returns:
        A new environment dict; `base` is not modified.
    """
    environment = dict(os.environ if base is None else base)
    existing = environment.get("PATH", "")

    if existing and extra_path:
        environment["PATH"] = f"{existing}{os.pathsep}{extra_path}"
    elif extra_path:
        environment["PATH"] = extra_path

    return environment


def resolve_executable(name: str, env: dict[str, str] | None = None) -> str | None:
    """
    Locate an executable using the PATH from `env`.

    Absolute or relative paths are returned as-is when they point at an
    existing file.

    Returns:
        Path to the executable, or None if it can't be found.
    """
    if os.sep in name:
        return name if Path(name).exists() else None

    search_path = (env or os.environ).get("PATH")
    return shutil.which(name, path=search_path)


class CommandRunner:
    """
    Async runner for external commands.

    Usage:
        >>> runner = CommandRunner(timeout=30)
        >>> output = await runner.run("/usr/bin/git", ["--version"])
        >>> output.exit_code
        0

    Attributes:
        timeout: Seconds to wait before killing the process (None = forever).
    """

    def __init__(self, timeout: float | None = None) -> None:
        """
        Initialize the runner.

        Args:
            timeout: Default timeout for every command, in seconds.
        """
        self.timeout = timeout

    async def run(
        self,
        executable: str,
        args: list[str],
        env: dict[str, str] | None = None,
    ) -> CommandOutput:
        """
        Run a command and wait for it to finish.

        Args:
            executable: Program to execute.
            args: Arguments (not including the program itself).
            env: Environment for the child. Defaults to the current one.

        Returns:
            CommandOutput with decoded stdout/stderr and the exit code.

        Raises:
            LaunchFailedError: If the process couldn't be started.
            CommandTimeoutError: If the process was killed after the timeout.
        """
        logger.debug(f"Running {executable} {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            logger.warning(f"Could not launch {executable}: {e}")
            raise LaunchFailedError(executable, str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"{executable} timed out after {self.timeout}s, killing")
            if process.returncode is None:
                process.kill()
            await process.wait()
            raise CommandTimeoutError(executable, self.timeout or 0) from e

        exit_code = process.returncode if process.returncode is not None else -1
        logger.debug(f"{executable} exited with {exit_code}")

        return CommandOutput(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=exit_code,
        )


# =============================================================================
# Exceptions
# =============================================================================

class CommandError(Exception):
    """Base exception for command execution."""
    pass


class LaunchFailedError(CommandError):
    """Raised when a process can't be started (missing, not executable)."""

    def __init__(self, executable: str, reason: str = "") -> None:
        self.executable = executable
        self.reason = reason
        message = f"Could not launch {executable}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CommandTimeoutError(CommandError):
    """Raised when a process is killed for exceeding its timeout."""

    def __init__(self, executable: str, seconds: float) -> None:
        self.executable = executable
        self.seconds = seconds
        super().__init__(f"{executable} did not finish within {seconds:g} seconds")
