"""Extract description, changelog and credits from a PR body.

The PR template has three headed sections::

    # Description of the Change
    ...
    # Changelog
    ...
    # Credits
    Props @octocat

Each section runs from its heading line to the next ``#`` or the end of the
body. HTML comments (template hints) are removed before matching.
"""

import re
from typing import List

from pydantic import BaseModel, Field

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_DESCRIPTION_RE = re.compile(r"#\s*Description of the Change.*\r?\n([^#]+)", re.IGNORECASE)
_CHANGELOG_RE = re.compile(r"#\s*Changelog.*\r?\n([^#]+)", re.IGNORECASE)
_CREDITS_RE = re.compile(r"#\s*Credits.*\r?\n([^#]+)", re.IGNORECASE)
_NEWLINE_RE = re.compile(r"\r?\n|\r")
_LINE_SPLIT_RE = re.compile(r"\r?\n")
_HANDLE_TOKEN_RE = re.compile(r"@([\w-]+)", re.ASCII)
# GitHub login: alphanumeric or single hyphens, no leading/trailing hyphen, max 39 chars
_USERNAME_RE = re.compile(r"^[a-z\d](?:[a-z\d]|-(?=[a-z\d])){0,38}$", re.IGNORECASE)


class ExtractedFields(BaseModel):
    """Structured fields parsed from a PR body."""

    description: str = ""
    changelog_entries: List[str] = Field(default_factory=list)
    credit_handles: List[str] = Field(default_factory=list)


def strip_comments(body: str | None) -> str:
    """Remove HTML comments, including multi-line ones."""
    if not body:
        return ""
    return _COMMENT_RE.sub("", body)


def _section(pattern: re.Pattern, body: str | None) -> str | None:
    match = pattern.search(strip_comments(body))
    if match is None:
        return None
    return match.group(1)


def get_description(body: str | None) -> str:
    """Description text with newlines collapsed and the ``Closes`` token dropped."""
    block = _section(_DESCRIPTION_RE, body)
    if block is None:
        return ""
    return _NEWLINE_RE.sub("", block).replace("Closes", "", 1).strip()


def get_changelog(body: str | None) -> List[str]:
    """Non-empty changelog lines, in order."""
    block = _section(_CHANGELOG_RE, body)
    if block is None:
        return []
    return [entry for entry in _LINE_SPLIT_RE.split(block) if entry]


def is_valid_username(handle: str) -> bool:
    return bool(_USERNAME_RE.match(handle))


def get_credits(body: str | None) -> List[str]:
    """GitHub handles mentioned in the Credits section, ``@`` stripped.

    Tokens that are not valid GitHub usernames (leading, trailing or doubled
    hyphens, underscores, more than 39 characters) are dropped.
    """
    block = _section(_CREDITS_RE, body)
    if block is None:
        return []
    return [handle for handle in _HANDLE_TOKEN_RE.findall(block) if is_valid_username(handle)]


def extract(body: str | None) -> ExtractedFields:
    """Parse all three template sections; never raises on empty input."""
    return ExtractedFields(
        description=get_description(body),
        changelog_entries=get_changelog(body),
        credit_handles=get_credits(body),
    )
