"""Reviewer specs from configuration and the request payload built from them."""

from typing import Iterable, List, Literal

from pydantic import BaseModel, ConfigDict, Field

TEAM_PREFIX = "team:"


class ReviewerSpec(BaseModel):
    """Configured reviewer: an individual account or a team.

    Configuration strings use the ``team:`` prefix for teams
    (``team:open-source-practice``), anything else is a user login.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["user", "team"]
    name: str

    @classmethod
    def parse(cls, value: str) -> "ReviewerSpec":
        value = value.strip()
        if value.startswith(TEAM_PREFIX):
            return cls(kind="team", name=value[len(TEAM_PREFIX) :].strip())
        return cls(kind="user", name=value)

    @property
    def is_team(self) -> bool:
        return self.kind == "team"

    def __str__(self) -> str:
        return f"{TEAM_PREFIX}{self.name}" if self.is_team else self.name


class ReviewerRequest(BaseModel):
    """Users and team slugs for a request/remove reviewers call."""

    users: List[str] = Field(default_factory=list)
    teams: List[str] = Field(default_factory=list)

    @classmethod
    def from_specs(cls, specs: Iterable[ReviewerSpec]) -> "ReviewerRequest":
        request = cls()
        for spec in specs:
            if not spec.name:
                continue
            if spec.is_team:
                request.teams.append(spec.name)
            else:
                request.users.append(spec.name)
        return request

    def is_empty(self) -> bool:
        return not self.users and not self.teams
