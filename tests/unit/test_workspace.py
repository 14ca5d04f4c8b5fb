"""Tests for the filesystem bridge — discovery and byte-exact I/O."""

from __future__ import annotations

from pathlib import Path

from pinbump.bridge.workspace import list_candidate_files, read_text, write_text


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("name: x\n")
    return path


class TestListCandidateFiles:
    def test_workflows_and_composite_actions(self, tmp_path):
        ci = _touch(tmp_path / ".github/workflows/ci.yml")
        release = _touch(tmp_path / ".github/workflows/release.yaml")
        _touch(tmp_path / ".github/workflows/README.md")
        action = _touch(tmp_path / ".github/actions/setup/action.yml")
        _touch(tmp_path / ".github/actions/setup/other.yml")

        assert list_candidate_files(tmp_path) == sorted([ci, release, action])

    def test_single_file(self, tmp_path):
        path = _touch(tmp_path / "wf.yml")
        assert list_candidate_files(path) == [path]

    def test_custom_workflows_dir(self, tmp_path):
        path = _touch(tmp_path / "ci/pipelines/build.yml")
        assert list_candidate_files(tmp_path, Path("ci/pipelines")) == [path]

    def test_empty_repository(self, tmp_path):
        assert list_candidate_files(tmp_path) == []


class TestTextIO:
    def test_line_endings_preserved(self, tmp_path):
        path = tmp_path / "wf.yml"
        raw = "a: 1\r\nb: 2\n\r\n".encode("utf-8")
        path.write_bytes(raw)
        text = read_text(path)
        assert text == "a: 1\r\nb: 2\n\r\n"
        write_text(path, text)
        assert path.read_bytes() == raw

    def test_utf8(self, tmp_path):
        path = tmp_path / "wf.yml"
        write_text(path, "name: déploiement ✓\n")
        assert read_text(path) == "name: déploiement ✓\n"
