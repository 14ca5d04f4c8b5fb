"""Bridges to external collaborators: the GitHub REST API and the filesystem."""

from pinbump.bridge.github import GitHubClient, build_client
from pinbump.bridge.workspace import list_candidate_files, read_text, write_text

__all__ = [
    "GitHubClient",
    "build_client",
    "list_candidate_files",
    "read_text",
    "write_text",
]
