"""Configuration loading for drifty (.drifty.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".drifty.yml"
REPORT_FORMATS = ("plaintext", "json", "yaml")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DocumentsConfig:
    """Which files count as tracked documents."""

    extensions: List[str] = field(default_factory=lambda: ["md", "markdown"])
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    """How the project root is discovered."""

    root_markers: List[str] = field(default_factory=lambda: [".git"])


@dataclass
class ReportConfig:
    """Defaults for `drifty report`."""

    format: str = "plaintext"


@dataclass
class DriftyConfig:
    """Represents the settings defined in .drifty.yml."""

    root: Path
    documents: DocumentsConfig = field(default_factory=DocumentsConfig)
    project: ProjectConfig = field(default_factory=ProjectConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(config_path: Path) -> DriftyConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DriftyConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    documents = DocumentsConfig()
    documents_data = _as_dict(data.get("documents"))
    if documents_data:
        extensions = _as_str_list(documents_data.get("extensions"))
        if extensions:
            documents.extensions = [ext.lstrip(".").lower() for ext in extensions]
        documents.exclude_paths = _as_str_list(documents_data.get("exclude_paths"))

    project = ProjectConfig()
    project_data = _as_dict(data.get("project"))
    if project_data:
        markers = _as_str_list(project_data.get("root_markers"))
        if markers:
            project.root_markers = markers

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    if report_data:
        fmt = _as_str(report_data.get("format"))
        if fmt is not None:
            fmt = fmt.lower()
            if fmt not in REPORT_FORMATS:
                raise ConfigError(
                    f"report.format must be one of {', '.join(REPORT_FORMATS)} (got {fmt!r})"
                )
            report.format = fmt

    return DriftyConfig(root=root, documents=documents, project=project, report=report)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DocumentsConfig",
    "DriftyConfig",
    "ProjectConfig",
    "REPORT_FORMATS",
    "ReportConfig",
    "load_config",
]
