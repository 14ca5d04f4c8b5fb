"""Filesystem bridge — workflow discovery and byte-exact text I/O.

Files are decoded and encoded as UTF-8 without newline translation so a
rewritten document differs from the original only where references changed.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

WORKFLOW_SUFFIXES = (".yml", ".yaml")
ACTIONS_DIR = Path(".github/actions")


def list_candidate_files(
    root: Path,
    workflows_dir: Path = Path(".github/workflows"),
) -> list[Path]:
    """Return the workflow and composite-action files under *root*.

    A file path is returned as-is.  For a directory, ``*.yml``/``*.yaml``
    files in ``root/workflows_dir`` and every ``action.yml``/``action.yaml``
    under ``root/.github/actions`` are collected, sorted and de-duplicated.
    """
    if root.is_file():
        return [root]

    found: set[Path] = set()

    workflows = root / workflows_dir
    if workflows.is_dir():
        for suffix in WORKFLOW_SUFFIXES:
            found.update(p for p in workflows.glob(f"*{suffix}") if p.is_file())

    actions = root / ACTIONS_DIR
    if actions.is_dir():
        for suffix in WORKFLOW_SUFFIXES:
            found.update(p for p in actions.rglob(f"action{suffix}") if p.is_file())

    files = sorted(found)
    logger.debug("found %d candidate file(s) under %s", len(files), root)
    return files


def read_text(path: Path) -> str:
    """Read *path* as UTF-8, preserving line endings."""
    return path.read_bytes().decode("utf-8")


def write_text(path: Path, text: str) -> None:
    """Write *text* to *path* as UTF-8, preserving line endings."""
    path.write_bytes(text.encode("utf-8"))
