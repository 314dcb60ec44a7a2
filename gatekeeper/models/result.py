"""Outcome of the mutations issued during a run."""

from typing import List, Literal

from pydantic import BaseModel, Field

MutationStatus = Literal["applied", "skipped", "failed"]


class MutationResult(BaseModel):
    """Result of one mutation (or the decision to skip it)."""

    action: str
    target: str = ""
    status: MutationStatus
    detail: str = ""


class ReconcileReport(BaseModel):
    """Everything a run did: mutation results plus fatal validation messages."""

    results: List[MutationResult] = Field(default_factory=list)
    failures: List[str] = Field(default_factory=list)

    @property
    def applied(self) -> List[MutationResult]:
        return [r for r in self.results if r.status == "applied"]

    @property
    def errors(self) -> List[MutationResult]:
        return [r for r in self.results if r.status == "failed"]

    @property
    def failed(self) -> bool:
        """True when the run should be reported as failed."""
        return bool(self.failures)
