"""Tests for the CLI entry point."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from gatekeeper.adapters import InMemoryPlatform
from gatekeeper.config import AppConfig, GitHubConfig
from gatekeeper.event import context_from_payload
from gatekeeper.main import EXIT_FAILED, EXIT_OK, EXIT_USAGE, main, parse_args, run
from gatekeeper.models import ReconcileReport

COMPLETE_BODY = "# Description of the Change\nText\n# Changelog\n- Added\n# Credits\n@octocat\n"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    import os

    for key in list(os.environ):
        if key.upper().startswith(("INPUT_", "GITHUB_")) or key.upper() == "RUNNER_DEBUG":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GITHUB_REPOSITORY", "owner/repo")


def _event(tmp_path: Path, body: str = COMPLETE_BODY, **pull) -> Path:
    data = {
        "pull_request": {
            "number": 7,
            "body": body,
            "draft": False,
            "user": {"login": "octocat", "type": "User"},
            "labels": [],
            "requested_reviewers": [],
            "assignees": [],
            "milestone": None,
            **pull,
        }
    }
    path = tmp_path / "event.json"
    path.write_text(json.dumps(data))
    return path


def test_parse_args_defaults() -> None:
    args = parse_args([])
    assert args.config == Path("gatekeeper.yaml")
    assert args.event is None
    assert args.check is False


def test_parse_args_run_subcommand() -> None:
    args = parse_args(["run", "--event", "e.json", "-c", "x.yaml"])
    assert args.event == Path("e.json")
    assert args.config == Path("x.yaml")


def test_check_prints_policy(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["--check", "--config", str(tmp_path / "none.yaml")]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Config OK: owner/repo" in out
    assert "needs:feedback" in out


def test_missing_event_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["--config", str(tmp_path / "none.yaml")]) == EXIT_USAGE
    assert "::error::" in capsys.readouterr().out


def test_event_without_pull_request(tmp_path: Path) -> None:
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"issue": {"number": 1}}))
    assert main(["--config", str(tmp_path / "none.yaml"), "--event", str(path)]) == EXIT_USAGE


def test_passing_pr_exits_ok(tmp_path: Path) -> None:
    platform = InMemoryPlatform()
    with patch("gatekeeper.main.GitHubAdapter", return_value=platform):
        code = main(["--config", str(tmp_path / "none.yaml"), "--event", str(_event(tmp_path))])
    assert code == EXIT_OK
    assert ("add_label", (7, "needs:code-review")) in platform.mutations()


def test_failing_pr_exits_failed_with_annotations(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    platform = InMemoryPlatform()
    event = _event(tmp_path, body="# Description of the Change\nText\n")
    with patch("gatekeeper.main.GitHubAdapter", return_value=platform):
        code = main(["--config", str(tmp_path / "none.yaml"), "--event", str(event)])
    assert code == EXIT_FAILED
    out = capsys.readouterr().out
    assert "::error::Please fill out the changelog information" in out
    assert "::error::Please fill out the credits information" in out
    assert ("add_label", (7, "needs:feedback")) in platform.mutations()


def test_failing_pr_with_validation_disabled_exits_ok(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("VALIDATE-CHANGELOG", "VALIDATE-CREDITS", "VALIDATE-DESCRIPTION"):
        monkeypatch.setenv(f"INPUT_{name}", "false")
    platform = InMemoryPlatform()
    with patch("gatekeeper.main.GitHubAdapter", return_value=platform):
        code = main(["--config", str(tmp_path / "none.yaml"), "--event", str(_event(tmp_path, body=""))])
    assert code == EXIT_OK
    assert ("add_label", (7, "needs:feedback")) in platform.mutations()


def test_platform_failures_do_not_fail_run(tmp_path: Path) -> None:
    platform = InMemoryPlatform()
    platform.fail_on = {"add_label", "request_reviewers", "add_assignee"}
    with patch("gatekeeper.main.GitHubAdapter", return_value=platform):
        code = main(["--config", str(tmp_path / "none.yaml"), "--event", str(_event(tmp_path))])
    assert code == EXIT_OK


def test_unexpected_error_exits_failed(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    with patch("gatekeeper.main.run", side_effect=RuntimeError("kaboom")):
        code = main(["--config", str(tmp_path / "none.yaml"), "--event", str(_event(tmp_path))])
    assert code == EXIT_FAILED
    assert "::error::kaboom" in capsys.readouterr().out


def test_run_removes_author_from_reviewers(tmp_path: Path) -> None:
    config = AppConfig(github=GitHubConfig(repository="owner/repo"))
    config.inputs.reviewers = "octocat\nhubot"
    ctx = context_from_payload(json.loads(_event(tmp_path).read_text()))
    platform = InMemoryPlatform()
    report = run(config, ctx, adapter=platform)
    assert isinstance(report, ReconcileReport)
    assert ("request_reviewers", (7, ("hubot",), ())) in platform.mutations()
