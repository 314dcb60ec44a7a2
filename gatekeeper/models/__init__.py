"""Data models for pull requests, issues, milestones, comments and reviewers (Pydantic)."""

from gatekeeper.models.comment import Comment
from gatekeeper.models.issue import ClosingIssue
from gatekeeper.models.milestone import Milestone
from gatekeeper.models.pull_request import Author, PullRequestContext, RequestedReviewer
from gatekeeper.models.result import MutationResult, ReconcileReport
from gatekeeper.models.reviewer import ReviewerRequest, ReviewerSpec

__all__ = [
    "Author",
    "ClosingIssue",
    "Comment",
    "Milestone",
    "MutationResult",
    "PullRequestContext",
    "ReconcileReport",
    "RequestedReviewer",
    "ReviewerRequest",
    "ReviewerSpec",
]
