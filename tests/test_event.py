"""Tests for building PullRequestContext from event payloads."""

import json
from pathlib import Path

import pytest

from gatekeeper.event import EventPayloadError, context_from_payload, load_event
from gatekeeper.models import Milestone, RequestedReviewer


def _payload(**pull_overrides) -> dict:
    pull = {
        "number": 42,
        "body": "# Description of the Change\ntext\n",
        "draft": False,
        "user": {"login": "octocat", "type": "User"},
        "labels": [{"name": "needs:feedback"}, {"name": "bug"}],
        "requested_reviewers": [{"login": "hubot"}],
        "requested_teams": [{"slug": "core", "name": "Core"}],
        "assignees": [{"login": "octocat"}],
        "milestone": {"number": 3, "title": "1.2.0", "due_on": "2024-03-01T08:00:00Z"},
    }
    pull.update(pull_overrides)
    return {"action": "opened", "pull_request": pull, "repository": {"full_name": "owner/repo"}}


def test_context_from_payload() -> None:
    ctx = context_from_payload(_payload())
    assert ctx.number == 42
    assert ctx.author.login == "octocat"
    assert ctx.author.is_user
    assert ctx.body.startswith("# Description")
    assert ctx.draft is False
    assert ctx.labels == frozenset({"needs:feedback", "bug"})
    assert ctx.requested_reviewers == frozenset(
        {RequestedReviewer(kind="user", name="hubot"), RequestedReviewer(kind="team", name="core")}
    )
    assert ctx.assignees == ["octocat"]
    assert ctx.milestone is not None
    assert ctx.milestone.number == 3
    assert ctx.milestone.title == "1.2.0"


def test_nulls_become_empty() -> None:
    """Null body, labels, reviewers and milestone are tolerated."""
    ctx = context_from_payload(
        _payload(body=None, labels=None, requested_reviewers=None, requested_teams=None, assignees=None, milestone=None)
    )
    assert ctx.body == ""
    assert ctx.labels == frozenset()
    assert ctx.requested_reviewers == frozenset()
    assert ctx.assignees == []
    assert ctx.milestone is None


def test_bot_author_and_draft() -> None:
    ctx = context_from_payload(_payload(user={"login": "dependabot[bot]", "type": "Bot"}, draft=True))
    assert ctx.author.is_bot
    assert ctx.draft is True


def test_label_lookup_is_case_insensitive() -> None:
    ctx = context_from_payload(_payload())
    assert ctx.has_label("NEEDS:FEEDBACK")
    assert not ctx.has_label("needs:code-review")
    assert ctx.is_requested("team", "CORE")
    assert not ctx.is_requested("user", "core")


def test_missing_pull_request_raises() -> None:
    with pytest.raises(EventPayloadError):
        context_from_payload({"action": "created", "issue": {"number": 1}})


def test_load_event(tmp_path: Path) -> None:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(_payload()))
    assert load_event(path)["pull_request"]["number"] == 42


def test_load_event_missing_file(tmp_path: Path) -> None:
    with pytest.raises(EventPayloadError, match="not found"):
        load_event(tmp_path / "absent.json")


def test_load_event_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "event.json"
    path.write_text("{not json")
    with pytest.raises(EventPayloadError, match="not valid JSON"):
        load_event(path)


def test_milestone_model_parses_due_date() -> None:
    ctx = context_from_payload(_payload())
    assert isinstance(ctx.milestone, Milestone)
    assert ctx.milestone.due_on is not None
