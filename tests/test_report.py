"""Tests for report rendering."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from drifty.models import DocumentReport, EntryResult, Status
from drifty.report import EMPTY_MESSAGE, render


def _reports() -> list[DocumentReport]:
    doc = Path("docs/guide.md")
    return [
        DocumentReport(
            doc_path=doc,
            results=[
                EntryResult(doc, "src/main.py", Status.CURRENT),
                EntryResult(doc, "$ROOT/Cargo.toml", Status.DRIFTED),
            ],
        )
    ]


def test_render_plaintext_lists_statuses() -> None:
    output = render(_reports(), "plaintext")

    assert output == (
        "docs/guide.md\n"
        "  CURRENT  src/main.py\n"
        "  DRIFTED  $ROOT/Cargo.toml\n"
    )


def test_render_plaintext_without_reports() -> None:
    assert render([], "plaintext") == EMPTY_MESSAGE


def test_render_json_maps_documents_to_statuses() -> None:
    payload = json.loads(render(_reports(), "json"))

    assert payload == {
        "docs/guide.md": {"$ROOT/Cargo.toml": "DRIFTED", "src/main.py": "CURRENT"}
    }


def test_render_yaml_maps_documents_to_statuses() -> None:
    payload = yaml.safe_load(render(_reports(), "yaml"))

    assert payload == {
        "docs/guide.md": {"$ROOT/Cargo.toml": "DRIFTED", "src/main.py": "CURRENT"}
    }


def test_render_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        render(_reports(), "html")
