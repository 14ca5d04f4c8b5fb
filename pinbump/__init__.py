"""Pinbump: pin GitHub Actions references to immutable commit SHAs.

Rewrites ``uses:`` references in workflow files so that every
``owner/repo[/path]@ref`` points at a full 40-character commit SHA, keeping
the human-readable version as a trailing ``# <tag>`` annotation.  With
``--update`` each reference is first advanced to the latest release.

Only the minimal span of each reference is rewritten; indentation,
quoting, blank lines and unrelated comments survive byte for byte.
"""

__version__ = "0.1.0"
__description__ = "Pin GitHub Actions to commit SHAs and optionally bump them to the latest release"

from pinbump.core.orchestrator import RunOrchestrator
from pinbump.core.resolver import ResolveMode, Resolver
from pinbump.cli.app import app as cli

__all__ = ["RunOrchestrator", "Resolver", "ResolveMode", "cli", "__version__"]
