"""Tests for the gh auth service: payload parsing, errors, switching, identities."""

import json

import pytest

from gh_switcher.core import Account
from gh_switcher.gh import (
    CommandFailedError,
    CommandTimedOutError,
    CommandTimeoutError,
    GHAuthService,
    InvalidPayloadError,
    LaunchFailedError,
    NoAccountsError,
    ToolNotInstalledError,
    parse_status_payload,
)
from conftest import STATUS_COMMAND, status_payload


SWITCH_COMMAND = "auth switch --hostname github.com --user teammate"
SETUP_COMMAND = "auth setup-git --hostname github.com"


class TestParseStatusPayload:
    """Decoding `gh auth status --json hosts`."""

    def test_sorts_active_first_then_host_and_login(self):
        payload = status_payload(
            Account("github.com", "zed"),
            Account("github.com", "Amy"),
            Account("GHE.corp.example", "bob"),
            Account("github.com", "octocat", is_active=True),
        )

        accounts = parse_status_payload(payload)

        assert [a.id for a in accounts] == [
            "github.com|octocat",
            "GHE.corp.example|bob",
            "github.com|Amy",
            "github.com|zed",
        ]

    def test_every_active_account_precedes_every_inactive(self):
        payload = status_payload(
            Account("b.example", "x"),
            Account("a.example", "y", is_active=True),
            Account("c.example", "z", is_active=True),
        )

        flags = [a.is_active for a in parse_status_payload(payload)]

        assert flags == sorted(flags, reverse=True)

    def test_host_falls_back_to_map_key(self):
        payload = json.dumps({"hosts": {"github.com": [{"login": "octocat", "active": True}]}})

        assert parse_status_payload(payload) == [Account("github.com", "octocat", True)]

    def test_active_defaults_to_false_when_missing_or_not_bool(self):
        payload = json.dumps(
            {"hosts": {"github.com": [{"login": "a"}, {"login": "b", "active": "yes"}]}}
        )

        assert all(not a.is_active for a in parse_status_payload(payload))

    def test_entries_without_login_are_skipped(self):
        payload = json.dumps(
            {"hosts": {"github.com": [{"host": "github.com"}, {"login": 7}, {"login": "ok"}]}}
        )

        assert [a.login for a in parse_status_payload(payload)] == ["ok"]

    def test_empty_hosts_is_an_empty_list(self):
        assert parse_status_payload('{"hosts": {}}') == []

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "not json",
            "[]",
            '{"accounts": {}}',
            '{"hosts": []}',
            '{"hosts": {"github.com": {"login": "a"}}}',
            '{"hosts": {"github.com": ["octocat"]}}',
        ],
    )
    def test_wrong_shapes_are_rejected(self, payload):
        with pytest.raises(InvalidPayloadError):
            parse_status_payload(payload)


class TestFetchAccounts:
    """fetch_accounts() against a scripted runner."""

    @pytest.mark.asyncio
    async def test_returns_sorted_accounts(self, service, fake_runner, active_account, inactive_account):
        fake_runner.ok(STATUS_COMMAND, status_payload(inactive_account, active_account))

        accounts = await service.fetch_accounts()

        assert accounts == [active_account, inactive_account]
        assert fake_runner.commands() == [STATUS_COMMAND]

    @pytest.mark.asyncio
    async def test_runs_gh_found_on_augmented_path(self, service, fake_runner, gh_bin, active_account):
        fake_runner.ok(STATUS_COMMAND, status_payload(active_account))

        await service.fetch_accounts()

        executable, _ = fake_runner.calls[0]
        assert executable == str(gh_bin / "gh")

    @pytest.mark.asyncio
    async def test_no_accounts(self, service, fake_runner):
        fake_runner.ok(STATUS_COMMAND, '{"hosts": {"github.com": [{"host": "github.com"}]}}')

        with pytest.raises(NoAccountsError):
            await service.fetch_accounts()

    @pytest.mark.asyncio
    async def test_invalid_payload(self, service, fake_runner):
        fake_runner.ok(STATUS_COMMAND, "<html>oops</html>")

        with pytest.raises(InvalidPayloadError) as exc_info:
            await service.fetch_accounts()

        assert exc_info.value.title == "Could not read gh auth status"

    @pytest.mark.asyncio
    async def test_gh_missing_from_path(self, fake_runner, commands, temp_dir):
        service = GHAuthService(fake_runner, commands, base_env={"PATH": str(temp_dir)})

        with pytest.raises(ToolNotInstalledError):
            await service.fetch_accounts()

        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_launch_failure_means_not_installed(self, service, fake_runner):
        fake_runner.queue(STATUS_COMMAND, LaunchFailedError("gh", "Permission denied"))

        with pytest.raises(ToolNotInstalledError):
            await service.fetch_accounts()

    @pytest.mark.asyncio
    async def test_not_found_output_means_not_installed(self, service, fake_runner):
        fake_runner.fail(STATUS_COMMAND, stderr="env: gh: No such file or directory", exit_code=127)

        with pytest.raises(ToolNotInstalledError):
            await service.fetch_accounts()

    @pytest.mark.asyncio
    async def test_not_found_marker_on_stdout(self, service, fake_runner):
        fake_runner.fail(STATUS_COMMAND, stderr="exec failed", stdout="sh: 1: gh: not found")

        with pytest.raises(ToolNotInstalledError):
            await service.fetch_accounts()

    @pytest.mark.asyncio
    async def test_command_failed_uses_stderr(self, service, fake_runner):
        fake_runner.fail(STATUS_COMMAND, stderr="  HTTP 401: Bad credentials \n", stdout="ignored")

        with pytest.raises(CommandFailedError) as exc_info:
            await service.fetch_accounts()

        assert exc_info.value.command == "gh auth status --json hosts"
        assert exc_info.value.details == "HTTP 401: Bad credentials"
        assert exc_info.value.title == "Command failed: gh auth status --json hosts"

    @pytest.mark.asyncio
    async def test_command_failed_falls_back_to_stdout_then_placeholder(self, service, fake_runner):
        fake_runner.fail(STATUS_COMMAND, stdout="something on stdout")
        with pytest.raises(CommandFailedError) as exc_info:
            await service.fetch_accounts()
        assert exc_info.value.details == "something on stdout"

        fake_runner.results.clear()
        fake_runner.fail(STATUS_COMMAND)
        with pytest.raises(CommandFailedError) as exc_info:
            await service.fetch_accounts()
        assert exc_info.value.details == "Unknown gh CLI error."

    @pytest.mark.asyncio
    async def test_timeout(self, service, fake_runner):
        fake_runner.queue(STATUS_COMMAND, CommandTimeoutError("gh", 5))

        with pytest.raises(CommandTimedOutError) as exc_info:
            await service.fetch_accounts()

        assert exc_info.value.title == "Command timed out: gh auth status --json hosts"
        assert "5 seconds" in exc_info.value.details


class TestSwitchAccount:
    """Switch sequencing."""

    @pytest.mark.asyncio
    async def test_runs_switch_then_setup_git(self, service, fake_runner):
        await service.switch_account("github.com", "teammate")

        assert fake_runner.commands() == [SWITCH_COMMAND, SETUP_COMMAND]

    @pytest.mark.asyncio
    async def test_setup_not_run_when_switch_fails(self, service, fake_runner):
        fake_runner.fail(SWITCH_COMMAND, stderr="not logged in to github.com account teammate")

        with pytest.raises(CommandFailedError) as exc_info:
            await service.switch_account("github.com", "teammate")

        assert exc_info.value.command == f"gh {SWITCH_COMMAND}"
        assert fake_runner.commands() == [SWITCH_COMMAND]

    @pytest.mark.asyncio
    async def test_setup_failure_surfaces(self, service, fake_runner):
        fake_runner.fail(SETUP_COMMAND, stderr="could not configure git")

        with pytest.raises(CommandFailedError) as exc_info:
            await service.switch_account("github.com", "teammate")

        assert exc_info.value.command == f"gh {SETUP_COMMAND}"


class TestApplyGitProfile:
    """Best-effort git identity application."""

    @pytest.mark.asyncio
    async def test_sets_name_and_email(self, service, fake_runner):
        report = await service.apply_git_profile(" Jane Doe ", "jane@example.com")

        assert fake_runner.calls == [
            ("/usr/bin/git", ["config", "--global", "user.name", "Jane Doe"]),
            ("/usr/bin/git", ["config", "--global", "user.email", "jane@example.com"]),
        ]
        assert report.applied == ["user.name", "user.email"]
        assert report.ok

    @pytest.mark.asyncio
    async def test_blank_profile_is_a_no_op(self, service, fake_runner):
        report = await service.apply_git_profile("  ", "")

        assert fake_runner.calls == []
        assert report.ok
        assert report.applied == []

    @pytest.mark.asyncio
    async def test_only_email(self, service, fake_runner):
        await service.apply_git_profile("", "jane@example.com")

        assert fake_runner.commands() == ["config --global user.email jane@example.com"]

    @pytest.mark.asyncio
    async def test_failures_are_reported_not_raised(self, service, fake_runner):
        fake_runner.queue(
            "config --global user.name Jane",
            LaunchFailedError("/usr/bin/git", "No such file or directory"),
        )
        fake_runner.fail("config --global user.email jane@example.com", stderr="could not lock config file")

        report = await service.apply_git_profile("Jane", "jane@example.com")

        assert not report.ok
        assert report.applied == []
        assert len(report.warnings) == 2
        assert "could not lock config file" in report.warnings[1]
