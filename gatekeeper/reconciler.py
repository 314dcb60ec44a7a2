"""Bring PR labels, comments, reviewers, assignees and milestone in line with the decision.

Runs on every pull request event, so every mutation first checks current
state and is skipped when it would change nothing:

- Bot-authored PR: add the pass label and request review. No validation.
- Draft PR: remove pass/fail labels and withdraw configured review requests.
  No validation.
- Ready PR: assign author to the PR and its closing issues, attach a
  milestone, then label/comment on failure or label/request review on pass.

Platform failures (GitPlatformError) are isolated per mutation: they are
logged and recorded in the report, and the remaining mutations still run.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List

from gatekeeper.adapters.base import GitPlatformAdapter, GitPlatformError
from gatekeeper.config import PolicyConfig
from gatekeeper.extractor import extract
from gatekeeper.milestone import select_milestone
from gatekeeper.models import (
    ClosingIssue,
    MutationResult,
    PullRequestContext,
    ReconcileReport,
    ReviewerRequest,
    ReviewerSpec,
)
from gatekeeper.policy import Decision, evaluate


@dataclass
class _Run:
    context: PullRequestContext
    report: ReconcileReport = field(default_factory=ReconcileReport)
    closing_issues: List[ClosingIssue] | None = None


class Reconciler:
    """Issues the idempotent mutations for one pull request."""

    def __init__(
        self,
        adapter: GitPlatformAdapter,
        config: PolicyConfig,
        log: logging.Logger | None = None,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self._log = log or logging.getLogger("gatekeeper.reconciler")

    def reconcile(self, context: PullRequestContext, decision: Decision | None = None) -> ReconcileReport:
        """Apply mutations for ``context`` and return what was done.

        ``decision`` is computed from the PR body when not given; it is never
        needed (and the body never read) for bot-authored or draft PRs.
        """
        run = _Run(context=context)
        if context.author.is_bot:
            self._log.info("PR #%s opened by bot %s, skipping validation", context.number, context.author.login)
            self._add_label(run, self._config.pass_label)
            self._request_review(run)
            return run.report

        if context.draft:
            # Labels and review requests from a previous ready state must not linger
            self._remove_label(run, self._config.fail_label)
            self._remove_label(run, self._config.pass_label)
            self._withdraw_review(run)
            self._log.info("Skipping DRAFT PR validation!")
            return run.report

        self._assign_pr(run)
        self._assign_issues(run)
        self._add_milestone(run)

        if decision is None:
            fields = extract(context.body)
            self._log.debug("Extracted fields: %s", fields.model_dump())
            decision = evaluate(fields, self._config)

        if decision.passed:
            self._remove_label(run, self._config.fail_label)
            self._add_label(run, self._config.pass_label)
            if context.requested_reviewers:
                self._skip(run, "request_reviewers", "", "review already requested")
            else:
                self._request_review(run)
        else:
            self._remove_label(run, self._config.pass_label)
            self._add_label(run, self._config.fail_label)
            self._add_comment(run, self._config.comment_for(context.author.login))
            run.report.failures.extend(decision.failures)
        return run.report

    def _attempt(self, run: _Run, action: str, target: str, call: Callable[[], None]) -> MutationResult:
        try:
            call()
        except GitPlatformError as e:
            self._log.warning("PR #%s: %s %s failed: %s", run.context.number, action, target, e)
            result = MutationResult(action=action, target=target, status="failed", detail=str(e))
        else:
            self._log.info("PR #%s: %s %s", run.context.number, action, target)
            result = MutationResult(action=action, target=target, status="applied")
        run.report.results.append(result)
        return result

    def _fail(self, run: _Run, action: str, target: str, error: GitPlatformError) -> None:
        self._log.warning("PR #%s: %s failed: %s", run.context.number, action, error)
        run.report.results.append(MutationResult(action=action, target=target, status="failed", detail=str(error)))

    def _skip(self, run: _Run, action: str, target: str, reason: str) -> None:
        self._log.info("PR #%s: skip %s %s (%s)", run.context.number, action, target, reason)
        run.report.results.append(MutationResult(action=action, target=target, status="skipped", detail=reason))

    def _add_label(self, run: _Run, name: str | None) -> None:
        if not name:
            return
        if run.context.has_label(name):
            self._skip(run, "add_label", name, "already present")
            return
        self._attempt(run, "add_label", name, lambda: self._adapter.add_label(run.context.number, name))

    def _remove_label(self, run: _Run, name: str | None) -> None:
        if not name or not run.context.has_label(name):
            return
        self._attempt(run, "remove_label", name, lambda: self._adapter.remove_label(run.context.number, name))

    def _request_review(self, run: _Run) -> None:
        specs = self._config.reviewers
        if not specs:
            return
        pending = [s for s in specs if not run.context.is_requested(s.kind, s.name)]
        request = ReviewerRequest.from_specs(pending)
        target = _describe(specs)
        if request.is_empty():
            self._skip(run, "request_reviewers", target, "already requested")
            return
        self._attempt(
            run,
            "request_reviewers",
            _describe(pending),
            lambda: self._adapter.request_reviewers(run.context.number, request),
        )

    def _withdraw_review(self, run: _Run) -> None:
        specs = self._config.reviewers
        if not specs:
            return
        outstanding = [s for s in specs if run.context.is_requested(s.kind, s.name)]
        request = ReviewerRequest.from_specs(outstanding)
        if request.is_empty():
            return
        self._attempt(
            run,
            "remove_requested_reviewers",
            _describe(outstanding),
            lambda: self._adapter.remove_requested_reviewers(run.context.number, request),
        )

    def _assign_pr(self, run: _Run) -> None:
        context = run.context
        if context.assignees or not self._config.assign_pull_request:
            return
        if not context.author.is_user:
            self._skip(run, "assign_pr", context.author.login, "author is not a user")
            return
        self._log.info("PR is unassigned, assigning PR")
        self._attempt(
            run,
            "assign_pr",
            context.author.login,
            lambda: self._adapter.add_assignee(context.number, context.author.login),
        )

    def _closing_issues(self, run: _Run) -> List[ClosingIssue]:
        if run.closing_issues is None:
            run.closing_issues = self._adapter.get_closing_issues(run.context.number)
            self._log.debug("Closing issues for PR #%s: %s", run.context.number, run.closing_issues)
        return run.closing_issues

    def _assign_issues(self, run: _Run) -> None:
        if not self._config.assign_issues:
            return
        author = run.context.author
        if not author.is_user:
            self._skip(run, "assign_issue", author.login, "author is not a user")
            return
        try:
            issues = self._closing_issues(run)
        except GitPlatformError as e:
            self._fail(run, "assign_issue", author.login, e)
            return
        if not issues:
            self._log.info("No issues connected to PR.")
            return
        self._log.info("Assigning issues to PR author")
        for issue in issues:
            target = f"#{issue.number}"
            if issue.is_assigned(author.login):
                self._skip(run, "assign_issue", target, f"already assigned to {author.login}")
                continue
            self._attempt(
                run,
                "assign_issue",
                target,
                lambda number=issue.number: self._adapter.add_assignee(number, author.login),
            )

    def _add_milestone(self, run: _Run) -> None:
        context = run.context
        if context.milestone is not None or not self._config.add_milestone:
            return
        try:
            issues = self._closing_issues(run)
            version = self._adapter.get_version(self._config.version_file)
            self._log.debug("Current version from %s: %s", self._config.version_file, version)
            milestone = select_milestone(issues, self._adapter.list_open_milestones, version)
        except GitPlatformError as e:
            self._fail(run, "set_milestone", "", e)
            return
        if milestone is None:
            self._skip(run, "set_milestone", "", "no suitable milestone")
            return
        self._attempt(
            run,
            "set_milestone",
            milestone.title,
            lambda: self._adapter.set_milestone(context.number, milestone.number),
        )

    def _add_comment(self, run: _Run, body: str | None) -> None:
        if not body:
            return
        try:
            comments = self._adapter.list_comments(run.context.number)
        except GitPlatformError as e:
            self._fail(run, "create_comment", "", e)
            return
        if any(c.is_automation and c.body == body for c in comments):
            self._log.info("Comment for author is already created! Skip adding new comment")
            self._skip(run, "create_comment", "", "identical bot comment exists")
            return
        self._attempt(run, "create_comment", "", lambda: self._adapter.create_comment(run.context.number, body))


def _describe(specs: Iterable[ReviewerSpec]) -> str:
    return ", ".join(str(s) for s in specs)
