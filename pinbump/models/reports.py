"""Run report models — per-file results and the end-of-run summary."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ResolutionWarning(BaseModel):
    """A reference that could not be resolved and was left untouched."""

    model_config = ConfigDict(frozen=True)

    path: Path
    line: int
    uses: str
    reason: str


class ReferenceChange(BaseModel):
    """A single rewritten reference, for ``old -> new`` display."""

    model_config = ConfigDict(frozen=True)

    line: int
    before: str
    after: str
    updated: bool = False


class FileResult(BaseModel):
    """Outcome of processing one workflow file."""

    model_config = ConfigDict(frozen=True)

    path: Path
    reference_count: int = 0
    changes: list[ReferenceChange] = Field(default_factory=list)
    warnings: list[ResolutionWarning] = Field(default_factory=list)
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.changes)


class RunSummary(BaseModel):
    """Aggregated counts for a whole invocation."""

    model_config = ConfigDict(frozen=True)

    files: list[FileResult] = Field(default_factory=list)
    references_pinned: int = 0
    references_updated: int = 0
    references_unchanged: int = 0
    references_skipped: int = 0
    dry_run: bool = False

    @property
    def files_scanned(self) -> int:
        return len(self.files)

    @property
    def files_changed(self) -> list[Path]:
        return [f.path for f in self.files if f.changed]

    @property
    def warnings(self) -> list[ResolutionWarning]:
        return [w for f in self.files for w in f.warnings]

    @property
    def references_total(self) -> int:
        return (
            self.references_pinned
            + self.references_updated
            + self.references_unchanged
            + self.references_skipped
        )
