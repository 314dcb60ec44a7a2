"""Pass/fail decision for the PR template.

A PR passes only when description, changelog and credits are all filled in.
The ``validate-*`` options do not change the decision (a PR with a missing
section is always labelled and commented as failing); they only control
whether the run itself is reported as failed.
"""

from typing import List

from pydantic import BaseModel, Field

from gatekeeper.config import PolicyConfig
from gatekeeper.extractor import ExtractedFields

MISSING_CHANGELOG_MESSAGE = "Please fill out the changelog information"
MISSING_CREDITS_MESSAGE = "Please fill out the credits information"
MISSING_DESCRIPTION_MESSAGE = "Please add some description about the changes made in PR"


class Decision(BaseModel):
    """Outcome of evaluating the extracted fields."""

    passed: bool
    missing_description: bool = False
    missing_changelog: bool = False
    missing_credits: bool = False
    failures: List[str] = Field(default_factory=list)

    @property
    def fatal(self) -> bool:
        return bool(self.failures)


def evaluate(fields: ExtractedFields, config: PolicyConfig) -> Decision:
    """Decide pass/fail and collect the fatal messages enabled by ``config``.

    Every enabled and missing section adds its own message; they do not
    short-circuit each other.
    """
    missing_description = not fields.description
    missing_changelog = not fields.changelog_entries
    missing_credits = not fields.credit_handles

    failures: List[str] = []
    if missing_changelog and config.validate_changelog:
        failures.append(MISSING_CHANGELOG_MESSAGE)
    if missing_credits and config.validate_credits:
        failures.append(MISSING_CREDITS_MESSAGE)
    if missing_description and config.validate_description:
        failures.append(MISSING_DESCRIPTION_MESSAGE)

    return Decision(
        passed=not (missing_description or missing_changelog or missing_credits),
        missing_description=missing_description,
        missing_changelog=missing_changelog,
        missing_credits=missing_credits,
        failures=failures,
    )
