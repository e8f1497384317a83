"""Tests for drifty.scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from drifty.errors import DriftError
from drifty.scanner import build_ignore_rule, find_documents, is_document


def _write(path: Path, content: str = "# Doc\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_is_document() -> None:
    assert is_document(Path("README.md"))
    assert is_document(Path("doc.markdown"))
    assert is_document(Path("path/to/file.MD"))
    assert not is_document(Path("file.txt"))
    assert not is_document(Path("file.rs"))
    assert not is_document(Path("noext"))
    assert is_document(Path("notes.rst"), extensions=("rst",))


def test_find_documents_walks_and_sorts(tmp_path: Path) -> None:
    _write(tmp_path / "z.md")
    _write(tmp_path / "docs" / "guide.markdown")
    _write(tmp_path / "docs" / "api" / "index.md")
    _write(tmp_path / "src" / "main.py", "print('x')\n")
    _write(tmp_path / ".github" / "PULL_REQUEST_TEMPLATE.md")
    _write(tmp_path / ".hidden.md")

    documents = find_documents(tmp_path)

    assert documents == [
        tmp_path / "docs" / "api" / "index.md",
        tmp_path / "docs" / "guide.markdown",
        tmp_path / "z.md",
    ]


def test_find_documents_defaults_to_current_directory(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path / "docs" / "guide.md")
    monkeypatch.chdir(tmp_path)

    assert find_documents() == [Path("docs/guide.md")]


def test_find_documents_respects_exclude_paths(tmp_path: Path) -> None:
    _write(tmp_path / "README.md")
    _write(tmp_path / "vendor" / "lib" / "README.md")
    _write(tmp_path / "notes.draft.md")

    documents = find_documents(tmp_path, exclude_paths=["vendor/", "*.draft.md"])

    assert documents == [tmp_path / "README.md"]


def test_find_documents_accepts_single_document(tmp_path: Path) -> None:
    _write(tmp_path / "README.md")

    assert find_documents(tmp_path / "README.md") == [tmp_path / "README.md"]


def test_find_documents_rejects_non_document_file(tmp_path: Path) -> None:
    _write(tmp_path / "main.rs", "fn main() {}\n")

    with pytest.raises(DriftError):
        find_documents(tmp_path / "main.rs")


def test_find_documents_rejects_missing_target(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        find_documents(missing)
    assert str(missing) in str(excinfo.value)


def test_ignore_rule_variants() -> None:
    directory_rule = build_ignore_rule("build/")
    anchored_rule = build_ignore_rule("/docs/internal")
    name_rule = build_ignore_rule("*.draft.md")

    assert directory_rule is not None and directory_rule.matches("build", True)
    assert not directory_rule.matches("build", False)
    assert anchored_rule is not None and anchored_rule.matches("docs/internal", True)
    assert not anchored_rule.matches("other/docs/internal", True)
    assert name_rule is not None and name_rule.matches("a/b/notes.draft.md", False)
    assert build_ignore_rule("   ") is None


def test_find_documents_anchors_exclude_paths_at_base(tmp_path: Path) -> None:
    _write(tmp_path / "docs" / "guide.md")
    _write(tmp_path / "docs" / "draft" / "wip.md")
    _write(tmp_path / "other" / "docs" / "draft" / "kept.md")

    from_subdir = find_documents(tmp_path / "docs", exclude_paths=["/docs/draft"], base=tmp_path)
    from_root = find_documents(tmp_path, exclude_paths=["/docs/draft"], base=tmp_path)

    assert from_subdir == [tmp_path / "docs" / "guide.md"]
    assert from_root == [
        tmp_path / "docs" / "guide.md",
        tmp_path / "other" / "docs" / "draft" / "kept.md",
    ]


def test_find_documents_outside_base_matches_relative_to_target(tmp_path: Path) -> None:
    _write(tmp_path / "outside" / "draft" / "wip.md")
    _write(tmp_path / "outside" / "guide.md")
    (tmp_path / "project").mkdir()

    documents = find_documents(
        tmp_path / "outside", exclude_paths=["/draft"], base=tmp_path / "project"
    )

    assert documents == [tmp_path / "outside" / "guide.md"]
