"""Shared test fixtures for pinbump."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

import pytest

from pinbump.core.errors import NoReleaseAvailable, UnresolvableReference
from pinbump.core.locator import locate_references
from pinbump.models.references import PinnableReference

SHA_1 = "1" * 40
SHA_2 = "2" * 40
SHA_3 = "3" * 40
SHA_4 = "4" * 40


class FakeActionsApi:
    """In-memory stand-in for the GitHub API collaborator.

    ``shas`` maps ``(owner, repo, ref)`` to a commit SHA and ``releases``
    maps ``(owner, repo)`` to the latest release tag.  Every call is
    recorded in ``calls``.  ``failures`` maps an ``owner/repo`` string to an
    exception raised by any lookup against that repository.
    """

    def __init__(
        self,
        shas: dict[tuple[str, str, str], str] | None = None,
        releases: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self.shas = dict(shas or {})
        self.releases = dict(releases or {})
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, ...]] = []
        self._lock = threading.Lock()

    def _record(self, *call: str) -> None:
        with self._lock:
            self.calls.append(call)
        failure = self.failures.get(f"{call[1]}/{call[2]}")
        if failure is not None:
            raise failure

    def resolve_ref_to_sha(self, owner: str, repo: str, ref: str) -> str:
        self._record("sha", owner, repo, ref)
        try:
            return self.shas[(owner, repo, ref)]
        except KeyError:
            raise UnresolvableReference(owner, repo, ref) from None

    def latest_release_tag(self, owner: str, repo: str) -> str:
        self._record("latest", owner, repo)
        try:
            return self.releases[(owner, repo)]
        except KeyError:
            raise NoReleaseAvailable(owner, repo) from None

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


@pytest.fixture
def fake_api() -> FakeActionsApi:
    """A fake API that knows a handful of common actions."""
    return FakeActionsApi(
        shas={
            ("actions", "checkout", "v4"): SHA_3,
            ("actions", "checkout", "v5"): SHA_1,
            ("actions", "setup-go", "v5"): SHA_2,
            ("github", "codeql-action", "v3"): SHA_4,
        },
        releases={
            ("actions", "checkout"): "v5",
        },
    )


@pytest.fixture
def make_reference() -> Callable[[str], PinnableReference]:
    """Factory fixture: locate the single reference in ``- uses: <value>``."""

    def _factory(value: str) -> PinnableReference:
        (reference,) = locate_references(f"      - uses: {value}\n")
        return reference

    return _factory


@pytest.fixture
def make_workflow(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a workflow under ``tmp_path/.github/workflows``."""

    def _factory(text: str, name: str = "ci.yml") -> Path:
        workflows = tmp_path / ".github" / "workflows"
        workflows.mkdir(parents=True, exist_ok=True)
        path = workflows / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _factory
