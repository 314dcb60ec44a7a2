"""GitHub API adapter (REST v3 plus GraphQL for closing issue references)."""

import base64
import logging
from typing import Any, Dict, Iterator, List
from urllib.parse import quote

import requests

from gatekeeper.adapters.base import GitPlatformAdapter, GitPlatformError
from gatekeeper.models import ClosingIssue, Comment, Milestone, ReviewerRequest

CLOSING_ISSUES_QUERY = """
query getClosingIssues($owner: String!, $repo: String!, $prNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $prNumber) {
      closingIssuesReferences(first: 100) {
        edges {
          node {
            number
            milestone {
              number
              title
              dueOn
            }
            assignees(first: 100) {
              nodes {
                login
              }
            }
          }
        }
      }
    }
  }
}
"""


def _milestone_from_api(data: Dict[str, Any] | None) -> Milestone | None:
    if not data or data.get("number") is None:
        return None
    return Milestone(
        number=data["number"],
        title=data.get("title") or "",
        due_on=data.get("due_on") or data.get("dueOn"),
    )


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    return Comment(
        body=data.get("body") or "",
        author=user.get("login", ""),
        author_type=user.get("type", "User"),
    )


def _closing_issues_from_graphql(data: Dict[str, Any]) -> List[ClosingIssue]:
    repository = data.get("repository") or {}
    pull = repository.get("pullRequest") or {}
    edges = (pull.get("closingIssuesReferences") or {}).get("edges") or []
    issues: List[ClosingIssue] = []
    for edge in edges:
        node = (edge or {}).get("node") or {}
        if node.get("number") is None:
            continue
        assignees = [n.get("login", "") for n in ((node.get("assignees") or {}).get("nodes") or []) if n]
        issues.append(
            ClosingIssue(
                number=node["number"],
                milestone=_milestone_from_api(node.get("milestone")),
                assignees=tuple(a for a in assignees if a),
            )
        )
    return issues


class GitHubAdapter(GitPlatformAdapter):
    """GitHub API implementation for a single repository."""

    def __init__(
        self,
        repo: str,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        graphql_url: str | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        if "/" not in repo:
            raise ValueError(f"Repository must be owner/repo, got {repo!r}")
        self.repo = repo
        self.owner, self.name = repo.split("/", 1)
        self._api_url = api_url.rstrip("/")
        self._graphql_url = graphql_url or f"{self._api_url}/graphql"
        self._log = log or logging.getLogger("gatekeeper.adapters.github")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        path_or_url: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        if path_or_url.startswith("http"):
            url = path_or_url
        else:
            url = f"{self._api_url}{path_or_url}" if path_or_url.startswith("/") else f"{self._api_url}/{path_or_url}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=30)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {url} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}", status_code=resp.status_code)
        self._log.debug("%s %s - %s", method, url, resp.status_code)
        return resp

    def _paginate(self, path: str, params: Dict[str, Any] | None = None) -> Iterator[Dict[str, Any]]:
        """Yield items from every page, following ``Link: rel="next"``."""
        params = dict(params or {})
        params.setdefault("per_page", 100)
        url: str | None = path
        while url:
            resp = self._request("GET", url, params=params)
            data = resp.json() or []
            yield from data
            url = (resp.links or {}).get("next", {}).get("url")
            # The next link already carries the query string
            params = None

    def _graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._request("POST", self._graphql_url, json={"query": query, "variables": variables})
        payload = resp.json() or {}
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise GitPlatformError(f"GraphQL error: {messages}")
        return payload.get("data") or {}

    def get_closing_issues(self, pr_number: int) -> List[ClosingIssue]:
        data = self._graphql(
            CLOSING_ISSUES_QUERY,
            {"owner": self.owner, "repo": self.name, "prNumber": pr_number},
        )
        return _closing_issues_from_graphql(data)

    def list_open_milestones(self) -> Iterator[Milestone]:
        params = {"state": "open", "sort": "due_on", "direction": "desc"}
        for data in self._paginate(f"/repos/{self.repo}/milestones", params=params):
            milestone = _milestone_from_api(data)
            if milestone is not None:
                yield milestone

    def get_repository_file_content(self, path: str) -> bytes:
        resp = self._request("GET", f"/repos/{self.repo}/contents/{quote(path.lstrip('/'))}")
        data = resp.json() or {}
        content = data.get("content") or ""
        if data.get("encoding", "base64") == "base64":
            return base64.b64decode(content)
        return content.encode("utf-8")

    def add_assignee(self, number: int, login: str) -> None:
        self._request("POST", f"/repos/{self.repo}/issues/{number}/assignees", json={"assignees": [login]})

    def add_label(self, number: int, name: str) -> None:
        self._request("POST", f"/repos/{self.repo}/issues/{number}/labels", json={"labels": [name]})

    def remove_label(self, number: int, name: str) -> None:
        self._request("DELETE", f"/repos/{self.repo}/issues/{number}/labels/{quote(name, safe='')}")

    def list_comments(self, number: int) -> List[Comment]:
        return [_comment_from_api(d) for d in self._paginate(f"/repos/{self.repo}/issues/{number}/comments")]

    def create_comment(self, number: int, body: str) -> None:
        self._request("POST", f"/repos/{self.repo}/issues/{number}/comments", json={"body": body})

    def request_reviewers(self, pr_number: int, reviewers: ReviewerRequest) -> None:
        self._request(
            "POST",
            f"/repos/{self.repo}/pulls/{pr_number}/requested_reviewers",
            json={"reviewers": reviewers.users, "team_reviewers": reviewers.teams},
        )

    def remove_requested_reviewers(self, pr_number: int, reviewers: ReviewerRequest) -> None:
        self._request(
            "DELETE",
            f"/repos/{self.repo}/pulls/{pr_number}/requested_reviewers",
            json={"reviewers": reviewers.users, "team_reviewers": reviewers.teams},
        )

    def set_milestone(self, number: int, milestone_number: int) -> None:
        self._request("PATCH", f"/repos/{self.repo}/issues/{number}", json={"milestone": milestone_number})
