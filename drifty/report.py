"""Rendering of drift reports as plain text, JSON, or YAML."""

from __future__ import annotations

import json
from typing import Dict, Sequence

import yaml

from .models import DocumentReport

EMPTY_MESSAGE = "No driftwatcher entries found."


def render(reports: Sequence[DocumentReport], fmt: str = "plaintext") -> str:
    """Render ``reports`` in the requested output format."""
    renderer = _RENDERERS.get(fmt)
    if renderer is None:
        raise ValueError(f"Unknown report format: {fmt}")
    return renderer(reports)


def render_plaintext(reports: Sequence[DocumentReport]) -> str:
    if not reports:
        return EMPTY_MESSAGE
    blocks = []
    for report in reports:
        lines = [str(report.doc_path)]
        lines.extend(f"  {result.status.value:8} {result.pattern}" for result in report.results)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def render_json(reports: Sequence[DocumentReport]) -> str:
    return json.dumps(_as_mapping(reports), indent=2, sort_keys=True)


def render_yaml(reports: Sequence[DocumentReport]) -> str:
    return yaml.safe_dump(_as_mapping(reports), sort_keys=True, default_flow_style=False)


def _as_mapping(reports: Sequence[DocumentReport]) -> Dict[str, Dict[str, str]]:
    return {
        str(report.doc_path): {result.pattern: result.status.value for result in report.results}
        for report in reports
    }


_RENDERERS = {
    "plaintext": render_plaintext,
    "json": render_json,
    "yaml": render_yaml,
}


__all__ = ["EMPTY_MESSAGE", "render", "render_json", "render_plaintext", "render_yaml"]
