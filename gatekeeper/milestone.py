"""Pick the milestone a pull request should be attached to.

Milestones of the issues the PR closes are authoritative. Only when none of
them carries a milestone does selection fall back to the repository's open
milestones. In both cases the candidates are sorted by title with
:func:`gatekeeper.version.version_compare` and the first one newer than the
current package version wins (or the smallest one when the version is
unknown).
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List

from gatekeeper.models import ClosingIssue, Milestone
from gatekeeper.version import is_newer, version_key

logger = logging.getLogger("gatekeeper.milestone")

OpenMilestones = Callable[[], Iterable[Milestone]]

_NO_DUE_DATE = datetime.min.replace(tzinfo=timezone.utc)


def _milestone_of(item: Milestone | ClosingIssue | None) -> Milestone | None:
    if isinstance(item, ClosingIssue):
        return item.milestone
    return item


def _due_on(milestone: Milestone) -> datetime:
    due = milestone.due_on
    if due is None:
        return _NO_DUE_DATE
    if due.tzinfo is None:
        return due.replace(tzinfo=timezone.utc)
    return due


def sort_milestones(milestones: Iterable[Milestone]) -> List[Milestone]:
    """Sort ascending by version title; ties keep latest due date first."""
    by_due = sorted(milestones, key=_due_on, reverse=True)
    return sorted(by_due, key=lambda m: version_key(m.title))


def _pick(candidates: List[Milestone], current_version: str | None) -> Milestone | None:
    if not candidates:
        return None
    if current_version:
        return next((m for m in candidates if is_newer(m.title, current_version)), None)
    return candidates[0]


def select_milestone(
    closing: Iterable[Milestone | ClosingIssue | None],
    open_milestones: OpenMilestones,
    current_version: str | None = None,
) -> Milestone | None:
    """Return the milestone to attach, or None when nothing qualifies.

    Args:
        closing: Milestones of the issues the PR closes (or the issues
            themselves); entries without a milestone are ignored.
        open_milestones: Zero-argument callable returning the repository's
            open milestones. Only called when no closing issue has a
            milestone; the returned iterable is drained before sorting.
        current_version: Current package version, if known.
    """
    from_issues = sort_milestones(m for m in map(_milestone_of, closing) if m is not None)
    if from_issues:
        milestone = _pick(from_issues, current_version)
        logger.info(
            "Milestone from closing issues: %s",
            milestone.title if milestone else "none newer than current version",
        )
        return milestone

    logger.info("No milestone found for closing issues, using open repository milestones")
    repo_milestones = list(open_milestones())
    if not repo_milestones:
        logger.info("Repository has no open milestones")
        return None
    milestone = _pick(sort_milestones(repo_milestones), current_version)
    logger.info(
        "Next open milestone: %s",
        milestone.title if milestone else "none newer than current version",
    )
    return milestone
