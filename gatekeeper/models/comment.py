"""Comment on an issue or PR."""

from pydantic import BaseModel


class Comment(BaseModel):
    """Comment on an issue or PR, as far as duplicate detection needs it."""

    body: str = ""
    author: str = ""
    author_type: str = "User"

    @property
    def is_automation(self) -> bool:
        """True when the comment was written by a bot or app identity."""
        return self.author_type == "Bot"
