"""Pull request snapshot read once per run from the triggering event."""

from typing import FrozenSet, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from gatekeeper.models.milestone import Milestone


class Author(BaseModel):
    """PR author account."""

    model_config = ConfigDict(frozen=True)

    login: str
    type: str = "User"

    @property
    def is_bot(self) -> bool:
        return self.type == "Bot"

    @property
    def is_user(self) -> bool:
        return self.type == "User"


class RequestedReviewer(BaseModel):
    """Reviewer (user login or team slug) currently requested on the PR."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["user", "team"]
    name: str


class PullRequestContext(BaseModel):
    """Immutable snapshot of the pull request state.

    Labels are kept as names; reviewer and label comparisons are
    case-insensitive, matching how GitHub treats them.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    author: Author
    body: str = ""
    draft: bool = False
    labels: FrozenSet[str] = Field(default_factory=frozenset)
    requested_reviewers: FrozenSet[RequestedReviewer] = Field(default_factory=frozenset)
    assignees: List[str] = Field(default_factory=list)
    milestone: Milestone | None = None

    def has_label(self, name: str) -> bool:
        wanted = name.lower()
        return any(label.lower() == wanted for label in self.labels)

    def is_requested(self, kind: str, name: str) -> bool:
        wanted = name.lower()
        return any(r.kind == kind and r.name.lower() == wanted for r in self.requested_reviewers)
