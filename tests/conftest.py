# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the gh-switcher test suite.
#
# No test runs the real gh or git: services get a FakeRunner that records
# every invocation and returns scripted output.
# =============================================================================

import asyncio
import json
import tempfile
from pathlib import Path

import pytest

from gh_switcher.config import CommandsConfig
from gh_switcher.core import Account, IdentityProfile
from gh_switcher.gh import CommandOutput, GHAuthService
from gh_switcher.git import GitProfileDiscovery
from gh_switcher.state import AppState
from gh_switcher.storage import MemoryBackend, PreferenceStore


STATUS_COMMAND = "auth status --json hosts"


class FakeRunner:
    """
    Stand-in for CommandRunner.

    Results are scripted per command line (arguments joined by spaces).
    Queued results are consumed in order; the last one is reused once the
    queue is down to a single entry. Unscripted commands succeed silently.

    Attributes:
        calls: (executable, args) for every invocation, in order.
        gate: If set, every run waits for this event before answering.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.results: dict[str, list[CommandOutput | Exception]] = {}
        self.gate: asyncio.Event | None = None

    def queue(self, command: str, result: CommandOutput | Exception) -> None:
        self.results.setdefault(command, []).append(result)

    def ok(self, command: str, stdout: str = "") -> None:
        self.queue(command, CommandOutput(stdout, "", 0))

    def fail(self, command: str, stderr: str = "", exit_code: int = 1, stdout: str = "") -> None:
        self.queue(command, CommandOutput(stdout, stderr, exit_code))

    def commands(self) -> list[str]:
        """Command lines run so far, without the executable."""
        return [" ".join(args) for _, args in self.calls]

    async def run(self, executable, args, env=None) -> CommandOutput:
        self.calls.append((executable, list(args)))
        if self.gate is not None:
            await self.gate.wait()

        pending = self.results.get(" ".join(args))
        if not pending:
            return CommandOutput("", "", 0)
        result = pending.pop(0) if len(pending) > 1 else pending[0]
        if isinstance(result, Exception):
            raise result
        return result


def status_payload(*accounts: Account) -> str:
    """Build `gh auth status --json hosts` output for the given accounts."""
    hosts: dict[str, list[dict]] = {}
    for account in accounts:
        hosts.setdefault(account.host, []).append(
            {
                "state": "success",
                "active": account.is_active,
                "host": account.host,
                "login": account.login,
                "tokenSource": "keyring",
                "gitProtocol": "https",
            }
        )
    return json.dumps({"hosts": hosts})


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gh_bin(temp_dir):
    """Directory containing an executable file named `gh`."""
    bin_dir = temp_dir / "bin"
    bin_dir.mkdir()
    gh = bin_dir / "gh"
    gh.write_text("#!/bin/sh\nexit 0\n")
    gh.chmod(0o755)
    return bin_dir


@pytest.fixture
def commands():
    """Tool configuration that doesn't add anything to PATH."""
    return CommandsConfig(
        gh_executable="gh",
        git_executable="/usr/bin/git",
        extra_path="",
        timeout_seconds=5,
    )


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def service(fake_runner, commands, gh_bin):
    """GHAuthService whose PATH only contains the fake gh."""
    return GHAuthService(fake_runner, commands, base_env={"PATH": str(gh_bin)})


@pytest.fixture
def store():
    """PreferenceStore backed by memory."""
    return PreferenceStore(MemoryBackend())


@pytest.fixture
def home(temp_dir):
    """Empty home directory for git config discovery."""
    path = temp_dir / "home"
    path.mkdir()
    return path


@pytest.fixture
def app_state(service, store, home):
    """AppState wired to the fake runner, memory store and a temp home."""
    return AppState(service, store, GitProfileDiscovery(home))


@pytest.fixture
def active_account():
    return Account(host="github.com", login="octocat", is_active=True)


@pytest.fixture
def inactive_account():
    return Account(host="github.com", login="teammate", is_active=False)


@pytest.fixture
def sample_profile():
    return IdentityProfile("Jane Doe", "jane@example.com")
