"""GitHub REST API bridge — resolves refs and latest releases over httpx.

Resolution order for ``resolve_ref_to_sha``
-------------------------------------------
1. ``GET /repos/{owner}/{repo}/git/ref/tags/{ref}``.  Lightweight tags point
   straight at a commit; annotated tags point at a tag object which is
   dereferenced through ``/git/tags/{sha}`` until a commit is reached.
2. ``GET /repos/{owner}/{repo}/commits/{ref}`` for branches and other
   commit-ish refs when no tag matched.

Status mapping
--------------
- 404 / 422              -> ``UnresolvableReference`` / ``NoReleaseAvailable``
- 429, 403 + exhausted   -> ``RateLimited``
- other non-2xx         -> ``TransportFailure``
- ``httpx.HTTPError``    -> ``TransportFailure``
- non-JSON 2xx body      -> ``TransportFailure``

Redirects (301 for renamed or transferred repositories) are followed.
"""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import quote

import httpx

from pinbump import __version__
from pinbump.config import PinbumpConfig
from pinbump.core.errors import (
    NoReleaseAvailable,
    RateLimited,
    TransportFailure,
    UnresolvableReference,
)
from pinbump.models.references import is_full_sha

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"

# Annotated tags may point at other tag objects; bound the chain.
_MAX_TAG_HOPS = 5


class GitHubClient:
    """Synchronous GitHub API client implementing the resolver's ``ActionsApi``.

    Safe to share between threads: ``httpx.Client`` is thread-safe and the
    client holds no other mutable state.

    Parameters
    ----------
    base_url:
        API root, e.g. ``https://api.github.com``.
    token:
        Bearer token; anonymous requests are made when empty.
    timeout:
        Per-request timeout in seconds.
    retries:
        Connection retries performed by the HTTP transport.
    transport:
        Custom transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str = "",
        *,
        timeout: float = 30.0,
        retries: int = 2,
        user_agent: str = f"pinbump/{__version__}",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport or httpx.HTTPTransport(retries=retries),
        )

    # ------------------------------------------------------------------
    # ActionsApi
    # ------------------------------------------------------------------

    def resolve_ref_to_sha(self, owner: str, repo: str, ref: str) -> str:
        """Return the full commit SHA that ``owner/repo@ref`` points at."""
        quoted = quote(ref, safe="/")
        response = self._get(f"/repos/{owner}/{repo}/git/ref/tags/{quoted}")
        if response.status_code not in (404, 422):
            self._raise_for_status(response)
            payload = self._json(response, expect=(dict, list))
            if isinstance(payload, list):
                raise UnresolvableReference(owner, repo, ref, "ambiguous tag reference")
            return self._peel(owner, repo, ref, payload.get("object") or {})

        response = self._get(f"/repos/{owner}/{repo}/commits/{quoted}")
        if response.status_code in (404, 422):
            raise UnresolvableReference(owner, repo, ref)
        self._raise_for_status(response)
        return self._checked(owner, repo, ref, self._json(response).get("sha"))

    def latest_release_tag(self, owner: str, repo: str) -> str:
        """Return the tag name of the latest published release."""
        response = self._get(f"/repos/{owner}/{repo}/releases/latest")
        if response.status_code == 404:
            raise NoReleaseAvailable(owner, repo)
        self._raise_for_status(response)
        tag = self._json(response).get("tag_name")
        if not tag:
            raise NoReleaseAvailable(owner, repo)
        return tag

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peel(self, owner: str, repo: str, ref: str, obj: dict[str, Any]) -> str:
        for _ in range(_MAX_TAG_HOPS):
            if obj.get("type") != "tag":
                return self._checked(owner, repo, ref, obj.get("sha"))
            response = self._get(f"/repos/{owner}/{repo}/git/tags/{obj.get('sha')}")
            if response.status_code == 404:
                raise UnresolvableReference(owner, repo, ref, "dangling annotated tag")
            self._raise_for_status(response)
            obj = self._json(response).get("object") or {}
        raise UnresolvableReference(owner, repo, ref, "annotated tag chain too deep")

    @staticmethod
    def _checked(owner: str, repo: str, ref: str, sha: Any) -> str:
        if not isinstance(sha, str) or not is_full_sha(sha):
            raise UnresolvableReference(owner, repo, ref, f"unexpected sha {sha!r}")
        return sha.lower()

    def _get(self, path: str) -> httpx.Response:
        logger.debug("GET %s", path)
        try:
            return self._client.get(path)
        except httpx.HTTPError as exc:
            raise TransportFailure(f"GET {path} failed: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response, expect: tuple[type, ...] = (dict,)) -> Any:
        path = response.request.url.path
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportFailure(
                f"GitHub API returned a non-JSON body on {path}",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, expect):
            raise TransportFailure(
                f"GitHub API returned an unexpected payload on {path}",
                status_code=response.status_code,
            )
        return payload

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if response.is_success:
            return
        path = response.request.url.path
        remaining = response.headers.get("x-ratelimit-remaining")
        if status == 429 or (status == 403 and remaining == "0"):
            raise RateLimited(
                f"GitHub API rate limit exceeded on {path}",
                status_code=status,
                reset_at=response.headers.get("x-ratelimit-reset"),
            )
        if status in (401, 403):
            raise TransportFailure(
                f"GitHub API refused {path} (HTTP {status}); check the token",
                status_code=status,
            )
        raise TransportFailure(f"GitHub API error on {path}: HTTP {status}", status_code=status)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def build_client(
    settings: PinbumpConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> GitHubClient:
    """Build a ``GitHubClient`` from settings; ``GITHUB_TOKEN`` is the token fallback."""
    token = settings.github_token or os.environ.get("GITHUB_TOKEN", "")
    return GitHubClient(
        settings.api_url,
        token,
        timeout=settings.request_timeout_seconds,
        retries=settings.http_retries,
        user_agent=settings.user_agent,
        transport=transport,
    )
