"""Reference models — located ``uses:`` occurrences and their resolved pins."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

FULL_SHA_PATTERN = r"^[0-9a-fA-F]{40}$"
_FULL_SHA_RE = re.compile(FULL_SHA_PATTERN)


def is_full_sha(value: str) -> bool:
    """Return True if *value* is a full, non-abbreviated commit SHA."""
    return bool(_FULL_SHA_RE.match(value))


class Span(BaseModel):
    """Half-open ``[start, end)`` character range into a document's text."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> Span:
        if self.end < self.start:
            raise ValueError(f"span end {self.end} precedes start {self.start}")
        return self

    def __len__(self) -> int:
        return self.end - self.start


class PinnableReference(BaseModel):
    """One ``owner/repo[/subpath]@ref`` occurrence inside a workflow document.

    ``span`` covers exactly the ref token (the text after ``@``).  ``tail``
    is the offset just past the reference token including any closing
    quote; this is where an annotation is inserted when the line has no
    trailing comment.  When a trailing comment exists it starts at
    ``tail`` and ``end`` marks its end, so ``[span.start, end)`` is the
    whole region the rewriter may touch.
    ``inline`` marks a reference inside a flow mapping (``{uses: ...}``);
    nothing may follow it on the line, so it is never annotated.

    One instance per occurrence: identical references on different lines
    are distinct objects with independent spans.
    """

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    subpath: str | None = None
    ref: str = Field(min_length=1)
    trailing_comment: str | None = None
    span: Span
    tail: int
    end: int
    line: int = Field(ge=1)
    inline: bool = False

    @model_validator(mode="after")
    def _consistent(self) -> PinnableReference:
        if not (self.span.end <= self.tail <= self.end):
            raise ValueError("reference offsets must satisfy span.end <= tail <= end")
        comment_len = len(self.trailing_comment or "")
        if self.end - self.tail != comment_len:
            raise ValueError("trailing comment length does not match its region")
        return self

    @property
    def action(self) -> str:
        """The ``owner/repo[/subpath]`` part, as written."""
        return f"{self.owner}/{self.repo}{self.subpath or ''}"

    @property
    def uses(self) -> str:
        """The full reference token, as written (without comment)."""
        return f"{self.action}@{self.ref}"

    @property
    def is_pinned(self) -> bool:
        """Whether the ref is already a full commit SHA."""
        return is_full_sha(self.ref)

    @property
    def comment_text(self) -> str | None:
        """The trailing comment with its leading whitespace and ``#`` removed."""
        if self.trailing_comment is None:
            return None
        return self.trailing_comment.strip().lstrip("#").strip()


class ResolvedTarget(BaseModel):
    """The commit a reference should point at, plus its display annotation.

    ``display_tag`` is the original ref when pinning, the latest release tag
    when updating, and ``None`` for a reference that needs no change.
    ``updated`` is True when a latest-release lookup moved the reference to
    a release other than the one it already names.
    """

    model_config = ConfigDict(frozen=True)

    sha: str = Field(pattern=FULL_SHA_PATTERN)
    display_tag: str | None = None
    updated: bool = False


class WorkflowDocument(BaseModel):
    """A workflow file's original text and the references located in it."""

    model_config = ConfigDict(frozen=True)

    path: Path
    original_text: str
    references: tuple[PinnableReference, ...] = ()
