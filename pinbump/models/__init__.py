"""Pinbump data models — all Pydantic v2, all frozen (immutable)."""

from pinbump.models.references import (
    FULL_SHA_PATTERN,
    PinnableReference,
    ResolvedTarget,
    Span,
    WorkflowDocument,
    is_full_sha,
)
from pinbump.models.reports import (
    FileResult,
    ReferenceChange,
    ResolutionWarning,
    RunSummary,
)

__all__ = [
    # references
    "FULL_SHA_PATTERN",
    "PinnableReference",
    "ResolvedTarget",
    "Span",
    "WorkflowDocument",
    "is_full_sha",
    # reports
    "FileResult",
    "ReferenceChange",
    "ResolutionWarning",
    "RunSummary",
]
