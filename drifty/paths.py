"""Watch-pattern resolution relative to a document and its project root."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import List, Sequence, Tuple

from .errors import NoMatchError, ProjectRootNotFoundError
from .hashing import hash_directory, hash_file, hash_many
from .logging import get_logger

ROOT_PREFIX = "$ROOT/"
DEFAULT_ROOT_MARKERS: Tuple[str, ...] = (".git",)

_GLOB_CHARS = ("*", "?", "[")

logger = get_logger("paths")


class PathResolver:
    """Resolves watch patterns found in one document's front matter."""

    def __init__(
        self,
        doc_path: Path | str,
        *,
        markers: Sequence[str] = DEFAULT_ROOT_MARKERS,
    ) -> None:
        self.doc_dir = Path(doc_path).parent
        self.project_root = find_project_root(self.doc_dir, markers=markers)

    def base_for(self, pattern: str) -> Tuple[Path, str]:
        """Return the directory a pattern is anchored to and the pattern relative to it."""
        if pattern.startswith(ROOT_PREFIX):
            return self.project_root, pattern[len(ROOT_PREFIX):]
        return self.doc_dir, pattern

    def resolve(self, pattern: str) -> List[Path]:
        """Expand a pattern into a sorted, de-duplicated list of existing paths.

        Literal patterns that do not exist resolve to an empty list; deciding
        whether that is an error is left to the caller.
        """
        base, relative = self.base_for(pattern)
        if not is_glob_pattern(relative):
            candidate = base / relative
            return [candidate] if candidate.exists() else []

        matches = set()
        try:
            for match in glob.iglob(relative, root_dir=base, recursive=True):
                if is_hidden(Path(match)):
                    continue
                matches.add(base / match)
        except OSError as exc:
            logger.warning("Glob error while expanding '%s': %s", pattern, exc)
        logger.debug("Pattern '%s' matched %d path(s) under %s", pattern, len(matches), base)
        return sorted(matches, key=str)

    def hash_pattern(self, pattern: str) -> str:
        """Compute the digest for whatever a pattern currently matches."""
        paths = self.resolve(pattern)
        if not paths:
            raise NoMatchError(f"Pattern '{pattern}' matches no files")

        base, _ = self.base_for(pattern)
        if len(paths) == 1:
            path = paths[0]
            if path.is_dir():
                return hash_directory(path, root=base)
            return hash_file(path)

        # Globs may name directories too; only file content takes part in the digest.
        files = [path for path in paths if path.is_file()]
        if not files:
            raise NoMatchError(f"Pattern '{pattern}' matches no files")
        return hash_many(files, root=base)


def find_project_root(start: Path, *, markers: Sequence[str] = DEFAULT_ROOT_MARKERS) -> Path:
    """Walk upward from ``start`` to the nearest directory holding a root marker."""
    origin = Path(start).absolute()
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in markers):
            return candidate
    raise ProjectRootNotFoundError(
        f"Could not find project root ({', '.join(markers)}) starting from {origin}"
    )


def is_glob_pattern(pattern: str) -> bool:
    return any(char in pattern for char in _GLOB_CHARS)


def is_hidden(path: Path) -> bool:
    """Return True when any component other than '.' or '..' starts with a dot."""
    return any(part.startswith(".") and part not in (".", "..") for part in path.parts)


__all__ = [
    "DEFAULT_ROOT_MARKERS",
    "PathResolver",
    "ROOT_PREFIX",
    "find_project_root",
    "is_glob_pattern",
    "is_hidden",
]
