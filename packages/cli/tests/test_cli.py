"""Tests for the CLI entry point."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import click
import pytest
import yaml
from click.testing import CliRunner

from reviewping_cli.cli import _build_store, main
from reviewping_cli.factory import build_notifier, require_token
from reviewping_core.errors import FetchError
from reviewping_core.models import PullRequestRecord, ViewerSnapshot
from reviewping_core.notifiers.console import ConsoleNotifier
from reviewping_core.orchestrator import ERROR_KEY, LAST_CHECKED_KEY, LAST_SEEN_KEY, UNREVIEWED_KEY, Trigger
from reviewping_store.gist import GistStore
from reviewping_store.memory import MemoryStore
from reviewping_store.sqlite import SQLiteStore

URL = "https://github.com/owner/repo/pull/7"


def _make_config(github_token="tok", **overrides):
    config = {
        "github_token": github_token,
        "poll_interval_minutes": 3,
        "github_api_url": "https://api.github.com",
        "request_timeout": 30,
        "page_sizes": {},
        "notifier": "console",
        "store": "memory",
    }
    config.update(overrides)
    return config


def _pr(url=URL, title="Fix login bug"):
    return PullRequestRecord(
        url=url,
        title=title,
        updated_at=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        author="bob",
        assignees=("alice",),
        repository="owner/repo",
    )


def _patch_common(mocker, config=None, store=None):
    """Patch load_config and _build_store for most tests."""
    cfg = config or _make_config()
    mocker.patch("reviewping_core.config.load_config", return_value=cfg)
    store = store if store is not None else MemoryStore()
    mocker.patch("reviewping_cli.cli._build_store", return_value=store)
    return cfg, store


def _patch_source(mocker, *prs, error=None):
    source = MagicMock()
    if error is not None:
        source.fetch.side_effect = error
    else:
        source.fetch.return_value = ViewerSnapshot(login="alice", pull_requests=tuple(prs))
    mocker.patch("reviewping_cli.factory.GitHubSource", return_value=source)
    return source


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


class TestCheckCommand:
    def test_missing_token(self, mocker):
        _patch_common(mocker, config=_make_config(github_token=None))

        result = CliRunner().invoke(main, ["check"])

        assert result.exit_code != 0
        assert "GITHUB_TOKEN" in result.output

    def test_shows_unreviewed_and_persists(self, mocker):
        _, store = _patch_common(mocker)
        _patch_source(mocker, _pr())

        result = CliRunner().invoke(main, ["check"])

        assert result.exit_code == 0
        assert "Fix login bug" in result.output
        assert "1 new" in result.output
        assert store.get([LAST_SEEN_KEY])[LAST_SEEN_KEY] == [URL]

    def test_second_check_reports_nothing_new(self, mocker):
        _, store = _patch_common(mocker, store=MemoryStore({LAST_SEEN_KEY: [URL]}))
        _patch_source(mocker, _pr())

        result = CliRunner().invoke(main, ["check"])

        assert "0 new" in result.output

    def test_nothing_waiting(self, mocker):
        _patch_common(mocker)
        _patch_source(mocker)

        result = CliRunner().invoke(main, ["check"])

        assert result.exit_code == 0
        assert "Nothing waiting" in result.output

    def test_fetch_failure_exits_nonzero_and_records_error(self, mocker):
        _, store = _patch_common(mocker)
        _patch_source(mocker, error=FetchError("Bad credentials"))

        result = CliRunner().invoke(main, ["check"])

        assert result.exit_code == 1
        assert "Bad credentials" in result.output
        assert store.get([ERROR_KEY])[ERROR_KEY] == "Bad credentials"

    def test_dry_run_does_not_write(self, mocker):
        _, store = _patch_common(mocker)
        _patch_source(mocker, _pr())

        result = CliRunner().invoke(main, ["check", "--dry-run"])

        assert result.exit_code == 0
        assert store.get([LAST_SEEN_KEY]) == {}

    def test_uses_manual_refresh_trigger(self, mocker):
        _patch_common(mocker)
        orchestrator = MagicMock()
        orchestrator.run_cycle.return_value = None
        mocker.patch("reviewping_cli.commands.check.build_orchestrator", return_value=orchestrator)

        result = CliRunner().invoke(main, ["check"])

        orchestrator.run_cycle.assert_called_once_with(Trigger.MANUAL_REFRESH)
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# watch command
# ---------------------------------------------------------------------------


class TestWatchCommand:
    def test_runs_scheduler_with_configured_interval(self, mocker):
        _patch_common(mocker, config=_make_config(poll_interval_minutes=5))
        _patch_source(mocker)
        scheduler_cls = mocker.patch("reviewping_cli.commands.watch.PollingScheduler")

        result = CliRunner().invoke(main, ["watch"])

        assert result.exit_code == 0
        assert scheduler_cls.call_args.kwargs["interval_minutes"] == 5
        scheduler_cls.return_value.run.assert_called_once()

    def test_interval_option_overrides_config(self, mocker):
        _patch_common(mocker)
        _patch_source(mocker)
        scheduler_cls = mocker.patch("reviewping_cli.commands.watch.PollingScheduler")

        CliRunner().invoke(main, ["watch", "--interval", "10"])

        assert scheduler_cls.call_args.kwargs["interval_minutes"] == 10

    def test_rejects_non_positive_interval(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["watch", "--interval", "0"])
        assert result.exit_code != 0

    def test_keyboard_interrupt_stops_cleanly(self, mocker):
        _patch_common(mocker)
        _patch_source(mocker)
        scheduler_cls = mocker.patch("reviewping_cli.commands.watch.PollingScheduler")
        scheduler_cls.return_value.run.side_effect = KeyboardInterrupt

        result = CliRunner().invoke(main, ["watch"])

        assert result.exit_code == 0
        scheduler_cls.return_value.stop.assert_called_once()
        assert "Stopped" in result.output


# ---------------------------------------------------------------------------
# list / status / open commands
# ---------------------------------------------------------------------------


class TestListCommand:
    def test_shows_stored_pull_requests(self, mocker):
        store = MemoryStore({UNREVIEWED_KEY: [_pr().to_dict()]})
        _patch_common(mocker, store=store)

        result = CliRunner().invoke(main, ["list"])

        assert result.exit_code == 0
        assert "Fix login bug" in result.output

    def test_filters_by_repo(self, mocker):
        store = MemoryStore({UNREVIEWED_KEY: [_pr().to_dict()]})
        _patch_common(mocker, store=store)

        result = CliRunner().invoke(main, ["list", "--repo", "other/repo"])

        assert "Nothing waiting" in result.output

    def test_shows_last_error_with_stale_list(self, mocker):
        store = MemoryStore({UNREVIEWED_KEY: [_pr().to_dict()], ERROR_KEY: "Bad credentials"})
        _patch_common(mocker, store=store)

        result = CliRunner().invoke(main, ["list"])

        assert "Bad credentials" in result.output
        assert "Fix login bug" in result.output

    def test_empty_store(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["list"])
        assert "Nothing waiting" in result.output


class TestStatusCommand:
    def test_no_checks_yet(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["status"])
        assert "No checks recorded" in result.output

    def test_shows_counts(self, mocker):
        store = MemoryStore(
            {
                UNREVIEWED_KEY: [_pr().to_dict()],
                LAST_SEEN_KEY: [URL],
                ERROR_KEY: None,
                LAST_CHECKED_KEY: "2024-03-01T12:00:00+00:00",
            }
        )
        _patch_common(mocker, store=store)

        result = CliRunner().invoke(main, ["status"])

        assert "Waiting for review: 1" in result.output
        assert "2024-03-01 12:00:00" in result.output

    def test_shows_error(self, mocker):
        _patch_common(mocker, store=MemoryStore({ERROR_KEY: "rate limited"}))
        result = CliRunner().invoke(main, ["status"])
        assert "rate limited" in result.output
        assert "!" in result.output


class TestOpenCommand:
    def test_opens_url_and_clears_notification(self, mocker):
        _patch_common(mocker)
        launch = mocker.patch("reviewping_core.notifiers.base.click.launch")

        result = CliRunner().invoke(main, ["open", URL])

        assert result.exit_code == 0
        launch.assert_called_once_with(URL)


# ---------------------------------------------------------------------------
# _build_store / factory
# ---------------------------------------------------------------------------


class TestBuildStore:
    def test_returns_sqlite_by_default(self, tmp_path):
        store = _build_store({"store_path": str(tmp_path / "test.db")})
        assert isinstance(store, SQLiteStore)
        store.close()

    def test_returns_memory_store(self):
        assert isinstance(_build_store({"store": "memory"}), MemoryStore)

    def test_returns_gist_store_when_configured(self):
        with patch("github.Github"):  # Github is a local import inside GistStore.__init__
            store = _build_store({"store": "gist", "gist_id": "abc123", "github_token": "tok"})
        assert isinstance(store, GistStore)

    def test_falls_back_to_memory_when_gist_id_missing(self):
        assert isinstance(_build_store({"store": "gist", "github_token": "tok"}), MemoryStore)

    def test_falls_back_to_memory_when_token_missing(self):
        assert isinstance(_build_store({"store": "gist", "gist_id": "abc123"}), MemoryStore)


class TestFactory:
    def test_console_notifier_by_default(self):
        assert isinstance(build_notifier({}), ConsoleNotifier)

    def test_unknown_notifier_rejected(self):
        with pytest.raises(click.UsageError):
            build_notifier({"notifier": "carrier-pigeon"})

    def test_require_token(self):
        assert require_token({"github_token": "tok"}) == "tok"
        with pytest.raises(click.UsageError):
            require_token({"github_token": None})


# ---------------------------------------------------------------------------
# init command
# ---------------------------------------------------------------------------


class TestInitCommand:
    def test_writes_sqlite_config(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _patch_common(mocker)

        result = CliRunner().invoke(main, ["init"], input="console\nsqlite\n~/.reviewping.db\n5\n")

        assert result.exit_code == 0
        config = yaml.safe_load((tmp_path / ".reviewping.yml").read_text())
        assert config["store"] == "sqlite"
        assert config["notifier"] == "console"
        assert config["poll_interval_minutes"] == 5
        assert "store_path" not in config

    def test_writes_gist_config(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _patch_common(mocker)
        mocker.patch("reviewping_cli.commands.init._create_state_gist", return_value="gist123")

        CliRunner().invoke(main, ["init"], input="console\ngist\n3\n")

        config = yaml.safe_load((tmp_path / ".reviewping.yml").read_text())
        assert config["store"] == "gist"
        assert config["gist_id"] == "gist123"
        assert "poll_interval_minutes" not in config

    def test_preserves_existing_keys(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".reviewping.yml").write_text("github_api_url: https://ghe.example.com/api\n")
        _patch_common(mocker)

        CliRunner().invoke(main, ["init"], input="console\nmemory\n3\n")

        config = yaml.safe_load((tmp_path / ".reviewping.yml").read_text())
        assert config["github_api_url"] == "https://ghe.example.com/api"
        assert config["store"] == "memory"

    def test_missing_token_names_enterprise_host_and_scopes(self):
        with pytest.raises(click.UsageError) as exc:
            require_token({"github_token": None, "github_api_url": "https://ghe.example.com/api/v3"})
        message = exc.value.message
        assert "gh auth login --hostname ghe.example.com" in message
        assert "`repo` scope" in message
