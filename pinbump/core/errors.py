"""Error taxonomy for reference resolution.

Per-reference errors (``ResolutionError`` subclasses) are recovered locally:
the reference is skipped or falls back to pin-only behavior.  A
``TransportFailure`` is fatal for the whole run: no file may be written once
one has been raised, since partially pinned output is worse than none.
"""

from __future__ import annotations


class PinbumpError(Exception):
    """Base class for all pinbump errors."""


class MalformedReference(PinbumpError):
    """A ``uses:`` value does not follow ``owner/repo[/subpath]@ref``.

    Not a user-facing error: such values are local actions, container
    images, expressions or otherwise non-pinnable and are skipped.
    """


class ResolutionError(PinbumpError):
    """A single reference could not be resolved."""

    def __init__(self, owner: str, repo: str, ref: str | None, message: str) -> None:
        self.owner = owner
        self.repo = repo
        self.ref = ref
        super().__init__(message)


class UnresolvableReference(ResolutionError):
    """The ref (or release tag) does not exist in the remote repository."""

    def __init__(self, owner: str, repo: str, ref: str, reason: str = "not found") -> None:
        super().__init__(owner, repo, ref, f"{owner}/{repo}@{ref}: {reason}")
        self.reason = reason


class NoReleaseAvailable(ResolutionError):
    """Update was requested but the repository has no published release."""

    def __init__(self, owner: str, repo: str) -> None:
        super().__init__(owner, repo, None, f"{owner}/{repo} has no published release")


class TransportFailure(PinbumpError):
    """Network error, timeout, auth failure or server error; aborts the run."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimited(TransportFailure):
    """The API rate limit is exhausted."""

    def __init__(self, message: str, *, status_code: int | None = None, reset_at: str | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.reset_at = reset_at
