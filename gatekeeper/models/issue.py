"""Issue closed by a pull request."""

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from gatekeeper.models.milestone import Milestone


class ClosingIssue(BaseModel):
    """Issue that will be closed when the PR merges."""

    model_config = ConfigDict(frozen=True)

    number: int
    milestone: Milestone | None = None
    assignees: Tuple[str, ...] = ()

    def is_assigned(self, login: str) -> bool:
        return any(a.lower() == login.lower() for a in self.assignees)
