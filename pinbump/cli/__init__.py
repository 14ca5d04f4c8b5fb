"""Pinbump CLI — Typer-based command-line interface.

Provides the ``pinbump`` command with ``pin`` (rewrite workflows, optionally
bumping to the latest release) and ``scan`` (offline listing of references).

All output uses Rich for formatted terminal display.
"""
