"""In-memory platform used as a test double and for dry runs.

Keeps labels, assignees, comments, reviewer requests and milestones in
plain Python state so the reconciler can run without network access.
Every call is recorded in ``calls``; ``fail_on`` makes chosen operations
raise GitPlatformError.
"""

from typing import Dict, Iterable, Iterator, List, Set, Tuple

from gatekeeper.adapters.base import GitPlatformAdapter, GitPlatformError
from gatekeeper.models import (
    ClosingIssue,
    Comment,
    Milestone,
    PullRequestContext,
    RequestedReviewer,
    ReviewerRequest,
)


class InMemoryPlatform(GitPlatformAdapter):
    """Git platform state for one repository, held in memory."""

    def __init__(
        self,
        closing_issues: Iterable[ClosingIssue] = (),
        milestones: Iterable[Milestone] = (),
        files: Dict[str, bytes] | None = None,
        page_size: int = 100,
    ) -> None:
        self.closing_issues: List[ClosingIssue] = list(closing_issues)
        self.milestones: List[Milestone] = list(milestones)
        self.files: Dict[str, bytes] = dict(files or {})
        self.page_size = page_size
        self.labels: Dict[int, List[str]] = {}
        self.assignees: Dict[int, List[str]] = {}
        self.comments: Dict[int, List[Comment]] = {}
        self.requested: Dict[int, Set[Tuple[str, str]]] = {}
        self.issue_milestones: Dict[int, int] = {}
        self.calls: List[Tuple[str, tuple]] = []
        self.fail_on: Set[str] = set()
        self.pages_fetched = 0

    def _record(self, op: str, *args: object) -> None:
        self.calls.append((op, args))
        if op in self.fail_on:
            raise GitPlatformError(f"{op} failed (injected)", status_code=500)

    def mutations(self) -> List[Tuple[str, tuple]]:
        """Recorded calls that change state."""
        reads = {"get_closing_issues", "list_open_milestones", "get_repository_file_content", "list_comments"}
        return [call for call in self.calls if call[0] not in reads]

    def get_closing_issues(self, pr_number: int) -> List[ClosingIssue]:
        self._record("get_closing_issues", pr_number)
        return list(self.closing_issues)

    def list_open_milestones(self) -> Iterator[Milestone]:
        self._record("list_open_milestones")
        for start in range(0, len(self.milestones), self.page_size):
            self.pages_fetched += 1
            yield from self.milestones[start : start + self.page_size]

    def get_repository_file_content(self, path: str) -> bytes:
        self._record("get_repository_file_content", path)
        if path not in self.files:
            raise GitPlatformError(f"Not found: {path}", status_code=404)
        return self.files[path]

    def add_assignee(self, number: int, login: str) -> None:
        self._record("add_assignee", number, login)
        current = self.assignees.setdefault(number, [])
        if login not in current:
            current.append(login)
        self.closing_issues = [
            issue.model_copy(update={"assignees": (*issue.assignees, login)})
            if issue.number == number and not issue.is_assigned(login)
            else issue
            for issue in self.closing_issues
        ]

    def add_label(self, number: int, name: str) -> None:
        self._record("add_label", number, name)
        current = self.labels.setdefault(number, [])
        if name.lower() not in (label.lower() for label in current):
            current.append(name)

    def remove_label(self, number: int, name: str) -> None:
        self._record("remove_label", number, name)
        current = self.labels.get(number, [])
        remaining = [label for label in current if label.lower() != name.lower()]
        if len(remaining) == len(current):
            raise GitPlatformError(f"Label does not exist: {name}", status_code=404)
        self.labels[number] = remaining

    def list_comments(self, number: int) -> List[Comment]:
        self._record("list_comments", number)
        return list(self.comments.get(number, []))

    def create_comment(self, number: int, body: str) -> None:
        self._record("create_comment", number, body)
        self.comments.setdefault(number, []).append(Comment(body=body, author="github-actions[bot]", author_type="Bot"))

    def request_reviewers(self, pr_number: int, reviewers: ReviewerRequest) -> None:
        self._record("request_reviewers", pr_number, tuple(reviewers.users), tuple(reviewers.teams))
        current = self.requested.setdefault(pr_number, set())
        current.update(("user", u.lower()) for u in reviewers.users)
        current.update(("team", t.lower()) for t in reviewers.teams)

    def remove_requested_reviewers(self, pr_number: int, reviewers: ReviewerRequest) -> None:
        self._record("remove_requested_reviewers", pr_number, tuple(reviewers.users), tuple(reviewers.teams))
        current = self.requested.setdefault(pr_number, set())
        current.difference_update(("user", u.lower()) for u in reviewers.users)
        current.difference_update(("team", t.lower()) for t in reviewers.teams)

    def set_milestone(self, number: int, milestone_number: int) -> None:
        self._record("set_milestone", number, milestone_number)
        self.issue_milestones[number] = milestone_number

    def seed(self, context: PullRequestContext) -> None:
        """Load the PR's labels, assignees, reviewers and milestone into the platform."""
        self.labels[context.number] = sorted(context.labels)
        self.assignees[context.number] = list(context.assignees)
        self.requested[context.number] = {(r.kind, r.name.lower()) for r in context.requested_reviewers}
        if context.milestone is not None:
            self.issue_milestones[context.number] = context.milestone.number

    def refresh(self, context: PullRequestContext) -> PullRequestContext:
        """Snapshot of ``context`` as the platform now sees it."""
        number = context.number
        milestone = context.milestone
        milestone_number = self.issue_milestones.get(number)
        if milestone_number is not None and (milestone is None or milestone.number != milestone_number):
            known = [m for m in self.milestones if m.number == milestone_number]
            known += [i.milestone for i in self.closing_issues if i.milestone and i.milestone.number == milestone_number]
            milestone = known[0] if known else Milestone(number=milestone_number, title="")
        return context.model_copy(
            update={
                "labels": frozenset(self.labels.get(number, [])),
                "assignees": list(self.assignees.get(number, [])),
                "requested_reviewers": frozenset(
                    RequestedReviewer(kind=kind, name=name) for kind, name in self.requested.get(number, set())
                ),
                "milestone": milestone,
            }
        )
