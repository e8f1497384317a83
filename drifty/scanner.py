"""Discovery of tracked documents below a target path."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .errors import DriftError
from .logging import get_logger

DEFAULT_EXTENSIONS = ("md", "markdown")

logger = get_logger("scanner")


@dataclass
class IgnoreRule:
    """A gitignore-style exclusion parsed from the ``documents.exclude_paths`` setting."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def is_document(path: Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> bool:
    suffix = path.suffix.lower().lstrip(".")
    return bool(suffix) and suffix in {ext.lower() for ext in extensions}


def find_documents(
    target: Optional[Path] = None,
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    exclude_paths: Sequence[str] = (),
    base: Optional[Path] = None,
) -> List[Path]:
    """Return the documents under ``target`` (default: current directory), sorted by path.

    ``exclude_paths`` rules match paths relative to ``base`` when the target lies
    inside it, otherwise relative to the target itself.
    """
    start = Path(target) if target is not None else Path(".")

    if start.is_file():
        if not is_document(start, extensions):
            raise DriftError(f"File is not a markdown file: {start}")
        return [start]
    if not start.exists():
        raise FileNotFoundError(f"Path does not exist: {start}")

    rules = [rule for rule in map(build_ignore_rule, exclude_paths) if rule is not None]
    prefix = _relative_prefix(start, base)
    documents = sorted(_iter_documents(start, extensions, rules, prefix), key=str)
    logger.debug("Found %d document(s) under %s", len(documents), start)
    return documents


def _relative_prefix(start: Path, base: Optional[Path]) -> str:
    if base is None:
        return ""
    try:
        prefix = start.resolve().relative_to(Path(base).resolve()).as_posix()
    except ValueError:
        return ""
    return "" if prefix == "." else prefix


def _iter_documents(
    root: Path, extensions: Sequence[str], rules: Sequence[IgnoreRule], prefix: str = ""
) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
        if prefix:
            rel_dir = f"{prefix}/{rel_dir}" if rel_dir else prefix

        kept = []
        for name in dirnames:
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if name.startswith(".") or _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in filenames:
            if filename.startswith("."):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            path = current_dir / filename
            if is_document(path, extensions):
                yield path


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


__all__ = ["DEFAULT_EXTENSIONS", "IgnoreRule", "build_ignore_rule", "find_documents", "is_document"]
