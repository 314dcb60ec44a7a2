"""Git platform adapters (base, GitHub and in-memory implementations)."""

from gatekeeper.adapters.base import GitPlatformAdapter, GitPlatformError
from gatekeeper.adapters.github import GitHubAdapter
from gatekeeper.adapters.memory import InMemoryPlatform

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter", "InMemoryPlatform"]
