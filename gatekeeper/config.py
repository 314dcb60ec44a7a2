"""Configuration loading from action inputs, YAML and environment.

Action inputs arrive as ``INPUT_<NAME>`` environment variables (GitHub
Actions keeps the hyphens, e.g. ``INPUT_FAIL-LABEL``) or from the ``inputs``
section of an optional YAML file. Every option accepts the literal
``false`` to disable it. Tokens come from the environment or from a secret
file; never put real tokens in config files committed to the repo.
"""

import os
from pathlib import Path
from typing import Any, Mapping, Tuple

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatekeeper.models import ReviewerSpec

DEFAULT_FAIL_LABEL = "needs:feedback"
DEFAULT_PASS_LABEL = "needs:code-review"
DEFAULT_COMMENT_TEMPLATE = (
    "{author} thanks for the PR! Could you please fill out the PR template with description, "
    "changelog, and credits information so that we can properly review and merge this?"
)
DEFAULT_REVIEWER = "team:open-source-practice"
DEFAULT_VERSION_FILE = "package.json"

DISABLED = "false"


def _is_disabled(value: Any) -> bool:
    return value is False or (isinstance(value, str) and value.strip().lower() == DISABLED)


def _read_secret(env: Mapping[str, str], env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = env.get(env_key)
    if value:
        return value.strip()
    file_path = env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


class PolicyConfig(BaseModel):
    """Resolved options for one run. Disabled strings are None."""

    model_config = ConfigDict(frozen=True)

    assign_issues: bool = True
    assign_pull_request: bool = True
    add_milestone: bool = True
    fail_label: str | None = DEFAULT_FAIL_LABEL
    pass_label: str | None = DEFAULT_PASS_LABEL
    comment_template: str | None = DEFAULT_COMMENT_TEMPLATE
    reviewers: Tuple[ReviewerSpec, ...] | None = (ReviewerSpec.parse(DEFAULT_REVIEWER),)
    validate_changelog: bool = True
    validate_credits: bool = True
    validate_description: bool = True
    version_file: str = DEFAULT_VERSION_FILE

    @field_validator("fail_label", "pass_label", "comment_template", mode="before")
    @classmethod
    def _disable_string(cls, value: Any) -> Any:
        if _is_disabled(value) or value == "":
            return None
        return value

    @field_validator("reviewers", mode="before")
    @classmethod
    def _parse_reviewers(cls, value: Any) -> Any:
        if value is None or _is_disabled(value):
            return None
        if isinstance(value, str):
            value = [value]
        return tuple(ReviewerSpec.parse(v) if isinstance(v, str) else v for v in value)

    def comment_for(self, author_login: str) -> str | None:
        """Comment body with ``{author}`` replaced by the author mention."""
        if not self.comment_template:
            return None
        return self.comment_template.replace("{author}", f"@{author_login}", 1)


def _input(name: str) -> AliasChoices:
    env_name = name.upper()
    return AliasChoices(
        f"INPUT_{env_name}",
        f"INPUT_{env_name.replace('-', '_')}",
        name,
        name.replace("-", "_"),
    )


class ActionInputs(BaseSettings):
    """Raw action inputs, as strings. Empty means "use the default"."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    assign_issues: str = Field(default="", validation_alias=_input("assign-issues"))
    assign_pr: str = Field(default="", validation_alias=_input("assign-pr"))
    add_milestone: str = Field(default="", validation_alias=_input("add-milestone"))
    fail_label: str = Field(default="", validation_alias=_input("fail-label"))
    pass_label: str = Field(default="", validation_alias=_input("pass-label"))
    comment_template: str = Field(default="", validation_alias=_input("comment-template"))
    validate_changelog: str = Field(default="", validation_alias=_input("validate-changelog"))
    validate_credits: str = Field(default="", validation_alias=_input("validate-credits"))
    validate_description: str = Field(default="", validation_alias=_input("validate-description"))
    reviewers: str = Field(
        default="",
        description="One reviewer per line; team:<slug> for teams",
        validation_alias=_input("reviewers"),
    )
    reviewer: str = Field(default="", description="Legacy single reviewer", validation_alias=_input("reviewer"))
    version_file: str = Field(default="", validation_alias=_input("version-file"))

    @field_validator("reviewers", mode="before")
    @classmethod
    def _join_lines(cls, value: Any) -> Any:
        # YAML may give a list for the multi-line input
        if isinstance(value, (list, tuple)):
            return "\n".join(str(v) for v in value)
        if isinstance(value, bool):
            return str(value).lower()
        return value

    @field_validator(
        "assign_issues",
        "assign_pr",
        "add_milestone",
        "fail_label",
        "pass_label",
        "validate_changelog",
        "validate_credits",
        "validate_description",
        "reviewer",
        "comment_template",
        "version_file",
        mode="before",
    )
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return str(value).lower()
        return value

    def reviewer_lines(self) -> list[str]:
        """Multi-line ``reviewers`` input: trimmed, empty lines dropped."""
        return [line.strip() for line in self.reviewers.splitlines() if line.strip()]

    def resolve_reviewers(self, author_login: str | None = None) -> list[str] | None:
        """Configured reviewers, falling back to ``reviewer`` then the default team.

        The PR author is never requested to review their own PR.
        """
        lines = self.reviewer_lines()
        if lines and _is_disabled(lines[0]):
            return None
        resolved = lines
        if not resolved:
            legacy = self.reviewer.strip()
            if _is_disabled(legacy):
                return None
            resolved = [legacy] if legacy else [DEFAULT_REVIEWER]
        if author_login:
            resolved = [r for r in resolved if r.lower() != author_login.lower()]
        return resolved

    def to_policy(self, author_login: str | None = None) -> PolicyConfig:
        """Resolve defaults and ``false`` values into a PolicyConfig."""

        def flag(value: str) -> bool:
            return not _is_disabled(value)

        def text(value: str, default: str) -> str | None:
            if _is_disabled(value):
                return None
            return value or default

        return PolicyConfig(
            assign_issues=flag(self.assign_issues),
            assign_pull_request=flag(self.assign_pr),
            add_milestone=flag(self.add_milestone),
            fail_label=text(self.fail_label, DEFAULT_FAIL_LABEL),
            pass_label=text(self.pass_label, DEFAULT_PASS_LABEL),
            comment_template=text(self.comment_template, DEFAULT_COMMENT_TEMPLATE),
            reviewers=self.resolve_reviewers(author_login),
            validate_changelog=flag(self.validate_changelog),
            validate_credits=flag(self.validate_credits),
            validate_description=flag(self.validate_description),
            version_file=self.version_file.strip() or DEFAULT_VERSION_FILE,
        )


class GitHubConfig(BaseSettings):
    """GitHub API settings and the Actions run environment."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="GITHUB_TOKEN or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="REST API base URL")
    graphql_url: str = Field(default="https://api.github.com/graphql", description="GraphQL endpoint")
    repository: str = Field(default="", description="Target repo e.g. octo-org/octo-repo")
    event_path: str = Field(default="", description="Path of the event payload JSON")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    inputs: ActionInputs = Field(default_factory=ActionInputs)

    def token_resolved(self, env: Mapping[str, str] | None = None) -> str | None:
        """Resolve GitHub token from config, env or secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret(os.environ if env is None else env, "GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def _substitute_env(value: Any, env: Mapping[str, str]) -> Any:
    """Replace ${VAR} and $VAR in strings with values from ``env``."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v, env) for v in value]
    return value


def load_config(config_path: Path | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Values from the file win over the environment. Without a file the
    config comes from the environment alone (the usual case inside a
    GitHub Actions run).
    """
    env = dict(os.environ if env is None else env)

    path = config_path or Path("gatekeeper.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw, env)

    return AppConfig(
        github=GitHubConfig(**(raw.get("github") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
        inputs=ActionInputs(**(raw.get("inputs") or {})),
    )
