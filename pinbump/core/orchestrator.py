"""Run orchestrator — locate, resolve, rewrite and write workflow files.

A run has two phases:

1. **Resolve.**  Every reference of every file is resolved on a bounded
   thread pool.  Unresolvable references become warnings.  A
   ``TransportFailure`` cancels the pending work and propagates before
   anything is written.
2. **Rewrite.**  Each document is rewritten in document order from the
   collected results and written back only if its text changed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path

from pinbump.bridge.workspace import read_text, write_text
from pinbump.core import rewriter
from pinbump.core.errors import UnresolvableReference
from pinbump.core.locator import ReferenceLocator
from pinbump.core.resolver import ResolveMode, Resolver
from pinbump.models.references import PinnableReference, ResolvedTarget, WorkflowDocument
from pinbump.models.reports import (
    FileResult,
    ReferenceChange,
    ResolutionWarning,
    RunSummary,
)

logger = logging.getLogger(__name__)

Outcome = ResolvedTarget | UnresolvableReference


def load_document(path: Path, reader: Callable[[Path], str] = read_text) -> WorkflowDocument:
    """Read *path* and locate its references."""
    text = reader(path)
    references = tuple(ReferenceLocator(text))
    logger.debug("%s: %d reference(s)", path, len(references))
    return WorkflowDocument(path=path, original_text=text, references=references)


class RunOrchestrator:
    """Drives one pin/update run over a list of workflow files.

    Parameters
    ----------
    resolver:
        Resolver wired to the API client and the run's cache.
    mode:
        ``ResolveMode.PIN`` or ``ResolveMode.UPDATE`` for every reference.
    max_workers:
        Size of the resolution thread pool.
    dry_run:
        Resolve and report, but never write.
    reader, writer:
        File I/O hooks; default to byte-exact UTF-8 I/O.
    """

    def __init__(
        self,
        resolver: Resolver,
        *,
        mode: ResolveMode = ResolveMode.PIN,
        max_workers: int = 8,
        dry_run: bool = False,
        reader: Callable[[Path], str] = read_text,
        writer: Callable[[Path, str], None] = write_text,
    ) -> None:
        self.resolver = resolver
        self.mode = mode
        self.max_workers = max(1, max_workers)
        self.dry_run = dry_run
        self._read = reader
        self._write = writer

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, paths: Sequence[Path]) -> RunSummary:
        """Process *paths* and return the run summary.

        Raises ``TransportFailure`` (no file written) or ``OSError``.
        """
        documents = [self.load(path) for path in paths]
        outcomes = self._resolve_all(documents)

        results: list[FileResult] = []
        counts = {"pinned": 0, "updated": 0, "unchanged": 0, "skipped": 0}
        for index, document in enumerate(documents):
            per_ref = [outcomes[(index, i)] for i in range(len(document.references))]
            results.append(self._finish(document, per_ref, counts))

        return RunSummary(
            files=results,
            references_pinned=counts["pinned"],
            references_updated=counts["updated"],
            references_unchanged=counts["unchanged"],
            references_skipped=counts["skipped"],
            dry_run=self.dry_run,
        )

    def load(self, path: Path) -> WorkflowDocument:
        """Read *path* and locate its references."""
        return load_document(path, self._read)

    # ------------------------------------------------------------------
    # Phase 1: resolution
    # ------------------------------------------------------------------

    def _resolve_all(
        self, documents: Sequence[WorkflowDocument]
    ) -> dict[tuple[int, int], Outcome]:
        jobs = [
            ((d, r), reference)
            for d, document in enumerate(documents)
            for r, reference in enumerate(document.references)
        ]
        outcomes: dict[tuple[int, int], Outcome] = {}
        if not jobs:
            return outcomes

        workers = min(self.max_workers, len(jobs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pinbump") as pool:
            futures: dict[Future[Outcome], tuple[int, int]] = {
                pool.submit(self._resolve_one, reference): key for key, reference in jobs
            }
            try:
                for future in as_completed(futures):
                    outcomes[futures[future]] = future.result()
            except BaseException:
                pool.shutdown(wait=False, cancel_futures=True)
                raise

        logger.debug(
            "resolved %d reference(s): %d cache hit(s), %d lookup(s)",
            len(jobs),
            self.resolver.cache.hits,
            self.resolver.cache.misses,
        )
        return outcomes

    def _resolve_one(self, reference: PinnableReference) -> Outcome:
        try:
            return self.resolver.resolve(reference, self.mode)
        except UnresolvableReference as exc:
            return exc

    # ------------------------------------------------------------------
    # Phase 2: rewrite
    # ------------------------------------------------------------------

    def _finish(
        self,
        document: WorkflowDocument,
        outcomes: list[Outcome],
        counts: dict[str, int],
    ) -> FileResult:
        text = document.original_text
        resolved: list[tuple[PinnableReference, ResolvedTarget]] = []
        changes: list[ReferenceChange] = []
        warnings: list[ResolutionWarning] = []

        for reference, outcome in zip(document.references, outcomes):
            if isinstance(outcome, UnresolvableReference):
                logger.warning(
                    "%s:%d: cannot resolve %s (%s)",
                    document.path, reference.line, reference.uses, outcome.reason,
                )
                warnings.append(ResolutionWarning(
                    path=document.path,
                    line=reference.line,
                    uses=reference.uses,
                    reason=outcome.reason,
                ))
                counts["skipped"] += 1
                continue

            resolved.append((reference, outcome))
            if rewriter.is_noop(text, reference, outcome):
                counts["unchanged"] += 1
                continue

            counts["updated" if outcome.updated else "pinned"] += 1
            changes.append(_describe(reference, outcome))

        new_text = rewriter.apply(text, resolved)
        written = False
        if new_text != text and not self.dry_run:
            self._write(document.path, new_text)
            written = True
            logger.info("%s: rewrote %d reference(s)", document.path, len(changes))

        return FileResult(
            path=document.path,
            reference_count=len(document.references),
            changes=changes,
            warnings=warnings,
            written=written,
        )


def _describe(reference: PinnableReference, target: ResolvedTarget) -> ReferenceChange:
    if target.display_tag is not None and not reference.inline:
        annotation = rewriter.format_annotation(target.display_tag)
    else:
        annotation = reference.trailing_comment or ""
    return ReferenceChange(
        line=reference.line,
        before=f"{reference.uses}{reference.trailing_comment or ''}",
        after=f"{reference.action}@{target.sha}{annotation}",
        updated=target.updated,
    )
