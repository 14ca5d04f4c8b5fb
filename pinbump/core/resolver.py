"""Resolver — turns a located reference into the commit it should pin to.

The resolver talks to the remote API only through the two-method
``ActionsApi`` protocol and only through the run's ``ResolutionCache``, so
identical lookups cost one round trip and tests can supply an in-memory
fake.

Modes
-----
PIN:
    Resolve the ref as written.  A ref that is already a full SHA is kept
    verbatim with no annotation change.
UPDATE:
    Look up the latest release, resolve *that* tag and annotate with it.
    Repositories without releases fall back to PIN behavior.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol, runtime_checkable

from pinbump.core.cache import ResolutionCache
from pinbump.core.errors import NoReleaseAvailable, UnresolvableReference
from pinbump.models.references import PinnableReference, ResolvedTarget, is_full_sha

logger = logging.getLogger(__name__)


class ResolveMode(str, Enum):
    PIN = "pin"
    UPDATE = "update"


@runtime_checkable
class ActionsApi(Protocol):
    """What the resolver needs from the remote API client.

    ``resolve_ref_to_sha`` raises ``UnresolvableReference`` when the ref
    does not exist; ``latest_release_tag`` raises ``NoReleaseAvailable``
    when the repository has no release.  Transport problems surface as
    ``TransportFailure``.
    """

    def resolve_ref_to_sha(self, owner: str, repo: str, ref: str) -> str: ...

    def latest_release_tag(self, owner: str, repo: str) -> str: ...


class Resolver:
    """Resolves ``PinnableReference`` objects through a shared cache.

    Parameters
    ----------
    api:
        The remote API collaborator.
    cache:
        Run-scoped cache.  A fresh one is created if not provided.
    """

    def __init__(self, api: ActionsApi, cache: ResolutionCache | None = None) -> None:
        self._api = api
        self.cache = cache if cache is not None else ResolutionCache()

    def resolve(self, reference: PinnableReference, mode: ResolveMode) -> ResolvedTarget:
        """Resolve *reference* under *mode*.

        Raises ``UnresolvableReference`` when the ref (or the latest tag)
        cannot be found, and lets ``TransportFailure`` propagate.
        """
        if mode is ResolveMode.UPDATE:
            latest = self._latest_tag(reference.owner, reference.repo)
            if latest is not None:
                sha = self._sha(reference.owner, reference.repo, latest)
                logger.debug("%s: latest release %s -> %s", reference.uses, latest, sha)
                moved = latest not in (reference.ref, reference.comment_text)
                return ResolvedTarget(sha=sha, display_tag=latest, updated=moved)
            logger.debug("%s: no releases, pinning current ref", reference.uses)

        if reference.is_pinned:
            return ResolvedTarget(sha=reference.ref, display_tag=None)

        sha = self._sha(reference.owner, reference.repo, reference.ref)
        return ResolvedTarget(sha=sha, display_tag=reference.ref)

    def _sha(self, owner: str, repo: str, ref: str) -> str:
        sha = self.cache.get_or_resolve_sha(owner, repo, ref, self._api.resolve_ref_to_sha)
        if not is_full_sha(sha):
            raise UnresolvableReference(owner, repo, ref, f"lookup returned invalid sha {sha!r}")
        return sha

    def _latest_tag(self, owner: str, repo: str) -> str | None:
        return self.cache.get_or_resolve_latest_tag(owner, repo, self._fetch_latest_tag)

    def _fetch_latest_tag(self, owner: str, repo: str) -> str | None:
        # "No release" is a definitive answer and is cached like a tag.
        try:
            return self._api.latest_release_tag(owner, repo)
        except NoReleaseAvailable:
            return None
