"""Abstract base for Git platform adapters."""

import json
import tomllib
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Iterator, List

from gatekeeper.models import ClosingIssue, Comment, Milestone, ReviewerRequest


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class GitPlatformAdapter(ABC):
    """Operations the gatekeeper needs from a Git hosting platform.

    ``number`` is an issue or pull request number in the configured
    repository; GitHub shares the numbering between both.
    """

    @abstractmethod
    def get_closing_issues(self, pr_number: int) -> List[ClosingIssue]:
        """Issues the PR will close when merged, with their milestones."""
        ...

    @abstractmethod
    def list_open_milestones(self) -> Iterator[Milestone]:
        """Open milestones of the repository, lazily across all pages."""
        ...

    @abstractmethod
    def get_repository_file_content(self, path: str) -> bytes:
        """Raw content of a file on the default branch."""
        ...

    @abstractmethod
    def add_assignee(self, number: int, login: str) -> None:
        """Assign ``login`` to an issue or PR."""
        ...

    @abstractmethod
    def add_label(self, number: int, name: str) -> None:
        """Add a label to an issue or PR."""
        ...

    @abstractmethod
    def remove_label(self, number: int, name: str) -> None:
        """Remove a label from an issue or PR."""
        ...

    @abstractmethod
    def list_comments(self, number: int) -> List[Comment]:
        """Comments on an issue or PR."""
        ...

    @abstractmethod
    def create_comment(self, number: int, body: str) -> None:
        """Post a comment on an issue or PR."""
        ...

    @abstractmethod
    def request_reviewers(self, pr_number: int, reviewers: ReviewerRequest) -> None:
        """Request review from users and teams."""
        ...

    @abstractmethod
    def remove_requested_reviewers(self, pr_number: int, reviewers: ReviewerRequest) -> None:
        """Withdraw review requests from users and teams."""
        ...

    @abstractmethod
    def set_milestone(self, number: int, milestone_number: int) -> None:
        """Attach a milestone to an issue or PR."""
        ...

    def get_version(self, path: str) -> str | None:
        """Current package version from a manifest file, None if unknown.

        JSON manifests (package.json) use ``version``, TOML manifests use
        ``project.version`` or ``tool.poetry.version``; any other file is
        read as a bare version string. A missing file means unknown; an
        unparsable one raises GitPlatformError.
        """
        try:
            content = self.get_repository_file_content(path)
        except GitPlatformError as e:
            if e.not_found:
                return None
            raise
        try:
            return parse_version_file(path, content)
        except (UnicodeDecodeError, ValueError, tomllib.TOMLDecodeError) as e:
            raise GitPlatformError(f"Malformed version file {path}: {e}") from e


def parse_version_file(path: str, content: bytes) -> str | None:
    """Extract the version from manifest ``content``; see get_version."""
    text = content.decode("utf-8")
    suffix = PurePosixPath(path).suffix.lower()
    if suffix == ".json":
        data = json.loads(text)
        version = data.get("version") if isinstance(data, dict) else None
    elif suffix == ".toml":
        doc = tomllib.loads(text)
        version = (doc.get("project") or {}).get("version")
        if version is None:
            version = ((doc.get("tool") or {}).get("poetry") or {}).get("version")
    else:
        version = text.strip()
    if not version:
        return None
    return str(version).strip()
