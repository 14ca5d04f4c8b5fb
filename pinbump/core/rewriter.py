"""Rewriter — applies resolved pins back onto the original text by span.

Replacements are applied back to front (descending ``span.start``) so the
offsets of earlier references stay valid while later ones change length.
Everything outside ``[span.start, reference.end)`` of each reference is
copied through unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable

from pinbump.models.references import PinnableReference, ResolvedTarget


def format_annotation(display_tag: str) -> str:
    """Return the trailing comment written after a pinned reference."""
    return f" # {display_tag}"


def render(text: str, reference: PinnableReference, target: ResolvedTarget) -> str:
    """Return the replacement for ``text[reference.span.start:reference.end]``."""
    quote = text[reference.span.end:reference.tail]
    if target.display_tag is not None and not reference.inline:
        comment = format_annotation(target.display_tag)
    else:
        comment = reference.trailing_comment or ""
    return f"{target.sha}{quote}{comment}"


def is_noop(text: str, reference: PinnableReference, target: ResolvedTarget) -> bool:
    """Whether applying *target* would leave the reference's region unchanged."""
    if target.display_tag is None and target.sha == reference.ref:
        return True
    return render(text, reference, target) == text[reference.span.start:reference.end]


def apply(
    original_text: str,
    resolved: Iterable[tuple[PinnableReference, ResolvedTarget]],
) -> str:
    """Produce new document text with every resolved reference rewritten.

    Raises ``ValueError`` if two references overlap or a span no longer
    holds the ref it was located with.
    """
    pairs = sorted(resolved, key=lambda pair: pair[0].span.start, reverse=True)
    pieces: list[str] = []
    cursor = len(original_text)

    for reference, target in pairs:
        if reference.end > cursor:
            raise ValueError(f"overlapping references at line {reference.line}")
        if original_text[reference.span.start:reference.span.end] != reference.ref:
            raise ValueError(
                f"line {reference.line}: span does not hold ref {reference.ref!r}"
            )
        if is_noop(original_text, reference, target):
            continue
        pieces.append(original_text[reference.end:cursor])
        pieces.append(render(original_text, reference, target))
        cursor = reference.span.start

    pieces.append(original_text[:cursor])
    return "".join(reversed(pieces))
