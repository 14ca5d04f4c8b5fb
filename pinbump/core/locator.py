"""Reference locator — finds every pinnable ``uses:`` reference in raw text.

The scan is line-based but structural: a line only counts when ``uses`` is
the YAML key of that line (optionally introduced by a ``- `` sequence
marker), or sits inside a single-line flow mapping such as
``- {uses: a/b@v1}``.  Comment lines never match, and lines that belong
to a block scalar (``run: |``, ``script: >-``, ...) are skipped entirely,
so shell snippets that happen to contain ``uses: a/b@v1`` are left alone.

Offsets are character offsets into the original string.  Line endings are
never normalized, so ``\\r\\n`` documents keep exact offsets.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from pinbump.core.errors import MalformedReference
from pinbump.models.references import PinnableReference, Span

logger = logging.getLogger(__name__)

_USES_LINE = re.compile(
    r"""
    ^[ \t]*
    (?:-[ \t]+)?
    uses[ \t]*:[ \t]+
    (?P<value>\S.*?)
    [ \t]*$
    """,
    re.VERBOSE,
)

_REFERENCE = re.compile(
    r"""
    (?P<quote>["']?)
    (?P<owner>[^\s/@"'\#]+)
    /(?P<repo>[^\s/@"'\#]+)
    (?P<subpath>(?:/[^\s/@"'\#]+)*)
    @(?P<ref>[^\s"']+)
    (?P=quote)
    (?P<comment>[ \t]+\#.*)?
    """,
    re.VERBOSE,
)

# ``key: |``, ``- run: >-`` and friends; the value lines that follow are
# opaque text until the indentation drops back.
_BLOCK_SCALAR = re.compile(
    r"""
    ^(?P<lead>[ \t]*(?:-[ \t]+)?)
    [^\s\#][^:]*:[ \t]+
    [|>][-+0-9]*
    [ \t]*(?:\#.*)?$
    """,
    re.VERBOSE,
)

_NON_PINNABLE_PREFIXES = ("./", "../", "docker://")

# A line whose value is a flow collection: ``- {uses: a/b@v1}``,
# ``steps: [{uses: a/b@v1}, {uses: c/d@v2}]``.
_FLOW_LINE = re.compile(
    r"""
    ^[ \t]*
    (?:-[ \t]+)?
    (?:[^\s\#{\[][^:]*:[ \t]+)?
    [{\[]
    """,
    re.VERBOSE,
)

_FLOW_USES = re.compile(
    r"""
    [{,][ \t]*
    uses[ \t]*:[ \t]*
    (?P<value>"[^"\n]*"|'[^'\n]*'|[^\s,{}\[\]"'\#][^\s,{}\[\]]*)
    """,
    re.VERBOSE,
)

_MENTIONS_USES = re.compile(r"[{,][ \t]*uses[ \t]*:")


def parse_reference(value: str) -> re.Match[str]:
    """Match a ``uses:`` value against ``owner/repo[/subpath]@ref[ #comment]``.

    Raises ``MalformedReference`` for anything that is not a pinnable
    remote reference (local paths, container images, expressions, ...).
    """
    bare = value.lstrip("\"'")
    if bare.startswith(_NON_PINNABLE_PREFIXES):
        raise MalformedReference(f"non-pinnable reference form: {value!r}")
    match = _REFERENCE.fullmatch(value)
    if match is None:
        raise MalformedReference(f"not an owner/repo@ref reference: {value!r}")
    if match.group("owner") in (".", ".."):
        raise MalformedReference(f"local action reference: {value!r}")
    return match


def _indent_of(text: str) -> int:
    return len(text) - len(text.lstrip(" \t"))


def _reference(match: re.Match[str], base: int, line: int, *, inline: bool) -> PinnableReference:
    comment = match.group("comment")
    tail = base + (match.start("comment") if comment else match.end())
    return PinnableReference(
        owner=match.group("owner"),
        repo=match.group("repo"),
        subpath=match.group("subpath") or None,
        ref=match.group("ref"),
        trailing_comment=comment,
        span=Span(start=base + match.start("ref"), end=base + match.end("ref")),
        tail=tail,
        end=base + match.end(),
        line=line,
        inline=inline,
    )


class ReferenceLocator:
    """Lazy, restartable scan over a document's pinnable references.

    Iterating yields ``PinnableReference`` objects in source order; each
    iteration rescans the text from the top.  Single-line flow mappings
    (``- {uses: a/b@v1}``) are located too; a ``uses:`` key the scan
    cannot place is logged as a warning rather than dropped silently.

    Parameters
    ----------
    text:
        The raw document text.
    """

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[PinnableReference]:
        offset = 0
        block_indent: int | None = None

        for lineno, raw in enumerate(self._text.splitlines(keepends=True), start=1):
            line_start = offset
            offset += len(raw)
            content = raw.rstrip("\r\n")

            if block_indent is not None:
                if not content.strip() or _indent_of(content) > block_indent:
                    continue
                block_indent = None

            block = _BLOCK_SCALAR.match(content)
            if block is not None:
                block_indent = len(block.group("lead"))
                continue

            found = _USES_LINE.match(content)
            if found is not None:
                try:
                    match = parse_reference(found.group("value"))
                except MalformedReference as exc:
                    logger.debug("line %d: skipped (%s)", lineno, exc)
                    continue
                base = line_start + found.start("value")
                yield _reference(match, base, lineno, inline=False)
                continue

            if _FLOW_LINE.match(content):
                for entry in _FLOW_USES.finditer(content):
                    try:
                        match = parse_reference(entry.group("value"))
                    except MalformedReference as exc:
                        logger.debug("line %d: skipped (%s)", lineno, exc)
                        continue
                    base = line_start + entry.start("value")
                    yield _reference(match, base, lineno, inline=True)
                continue

            if not content.lstrip().startswith("#") and _MENTIONS_USES.search(content):
                logger.warning("line %d: 'uses:' in an unsupported layout, not pinned", lineno)


def locate_references(text: str) -> list[PinnableReference]:
    """Return every pinnable reference in *text*, in document order."""
    return list(ReferenceLocator(text))
