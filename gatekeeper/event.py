"""Build the pull request snapshot from a GitHub event payload."""

import json
from pathlib import Path
from typing import Any, Dict

from gatekeeper.models import Author, Milestone, PullRequestContext, RequestedReviewer


class EventPayloadError(ValueError):
    """Raised when the event payload is missing or has no pull request."""


def load_event(path: Path | str) -> Dict[str, Any]:
    """Read the event JSON written by the Actions runner (GITHUB_EVENT_PATH)."""
    event_path = Path(path)
    if not event_path.is_file():
        raise EventPayloadError(f"Event payload not found: {event_path}")
    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise EventPayloadError(f"Event payload is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise EventPayloadError("Event payload must be a JSON object")
    return payload


def context_from_payload(payload: Dict[str, Any]) -> PullRequestContext:
    """Snapshot of ``payload["pull_request"]``.

    Raises:
        EventPayloadError: If the payload has no usable pull request.
    """
    pull = payload.get("pull_request")
    if not isinstance(pull, dict) or pull.get("number") is None:
        raise EventPayloadError("Event payload has no pull_request; run this on pull_request events")

    user = pull.get("user") or {}
    labels = [lb["name"] for lb in (pull.get("labels") or []) if isinstance(lb, dict) and lb.get("name")]
    requested = [
        RequestedReviewer(kind="user", name=r["login"])
        for r in (pull.get("requested_reviewers") or [])
        if isinstance(r, dict) and r.get("login")
    ]
    requested += [
        RequestedReviewer(kind="team", name=t["slug"])
        for t in (pull.get("requested_teams") or [])
        if isinstance(t, dict) and t.get("slug")
    ]
    assignees = [a["login"] for a in (pull.get("assignees") or []) if isinstance(a, dict) and a.get("login")]
    milestone_data = pull.get("milestone")

    try:
        return PullRequestContext(
            number=int(pull["number"]),
            author=Author(login=user.get("login", ""), type=user.get("type", "User")),
            body=pull.get("body") or "",
            draft=bool(pull.get("draft")),
            labels=labels,
            requested_reviewers=requested,
            assignees=assignees,
            milestone=(
                Milestone(
                    number=milestone_data["number"],
                    title=milestone_data.get("title") or "",
                    due_on=milestone_data.get("due_on"),
                )
                if isinstance(milestone_data, dict) and milestone_data.get("number") is not None
                else None
            ),
        )
    except (TypeError, ValueError) as e:
        raise EventPayloadError(f"Invalid pull_request payload: {e}") from e
