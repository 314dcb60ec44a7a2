"""Repository milestone model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Milestone(BaseModel):
    """Milestone (release) a PR or issue can be targeted at.

    ``title`` is expected to be version-like (e.g. ``2.1.0``); ``due_on`` is
    only used to order candidates before version comparison.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    due_on: datetime | None = None
