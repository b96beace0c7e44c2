from __future__ import annotations

import logging
from typing import Any, Iterator, Protocol

import httpx

from .report import STATUS_CONTEXT, CommitState

logger = logging.getLogger("automerge.review")

_MAX_DESCRIPTION = 140


class ReviewSurface(Protocol):
    """Where decisions become visible. Both writes must be idempotent."""

    def post_status(self, sha: str, state: CommitState, description: str) -> None: ...

    def update_comment(self, number: int, body: str) -> None: ...


class GitHubReviewSurface:
    """Commit statuses and a single bot-owned comment on a registry pull request."""

    def __init__(
        self,
        repo: str,
        token: str,
        *,
        whoami: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.repo = repo
        self.whoami = whoami
        self.client = httpx.Client(
            base_url=api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GitHubReviewSurface":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        resp = self.client.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp

    def _paginate(self, url: str) -> Iterator[dict]:
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": 100}
        while next_url:
            resp = self._request("GET", next_url, params=params)
            yield from resp.json()
            next_url = resp.links.get("next", {}).get("url")
            params = None

    def post_status(self, sha: str, state: CommitState, description: str) -> None:
        payload = {
            "state": state.value,
            "context": STATUS_CONTEXT,
            "description": description[:_MAX_DESCRIPTION],
        }
        self._request("POST", f"/repos/{self.repo}/statuses/{sha}", json=payload)
        logger.info("status %s posted for %s: %s", state.value, sha, description)

    def find_own_comment(self, number: int) -> dict | None:
        for comment in self._paginate(f"/repos/{self.repo}/issues/{number}/comments"):
            if (comment.get("user") or {}).get("login") == self.whoami:
                return comment
        return None

    def update_comment(self, number: int, body: str) -> None:
        existing = self.find_own_comment(number)
        if existing is None:
            self._request("POST", f"/repos/{self.repo}/issues/{number}/comments", json={"body": body})
            logger.info("comment created on #%d", number)
            return
        if existing.get("body") == body:
            logger.info("comment on #%d already up to date", number)
            return
        self._request("PATCH", f"/repos/{self.repo}/issues/comments/{existing['id']}", json={"body": body})
        logger.info("comment %s updated on #%d", existing["id"], number)

    def get_pull_request(self, number: int) -> dict:
        return self._request("GET", f"/repos/{self.repo}/pulls/{number}").json()

    def changed_files(self, number: int) -> list[str]:
        return [f["filename"] for f in self._paginate(f"/repos/{self.repo}/pulls/{number}/files")]
