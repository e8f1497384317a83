"""Content hashing for tracked files, file sets, and directories."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import FileAccessError
from .logging import get_logger

_CHUNK_SIZE = 1024 * 1024
_SEPARATOR = b"\n"

logger = get_logger("hashing")


def hash_file(path: Path) -> str:
    """Return the SHA-256 hex digest of a single file's content."""
    digest = hashlib.sha256()
    _feed_file(digest, path)
    return digest.hexdigest()


def hash_many(paths: Iterable[Path], root: Optional[Path] = None) -> str:
    """Return one digest covering the names and contents of a set of files.

    Files are sorted by the path string fed to the digest, so the result does
    not depend on enumeration order. When ``root`` is given the fed string is
    the POSIX path relative to it, which keeps digests stable no matter where
    the tool is launched from. Any unreadable file aborts the whole digest.
    """
    labelled: List[Tuple[str, Path]] = [(_label(path, root), path) for path in paths]
    labelled.sort(key=lambda item: item[0])

    digest = hashlib.sha256()
    for label, path in labelled:
        digest.update(os.fsencode(label))
        digest.update(_SEPARATOR)
        _feed_file(digest, path)
        digest.update(_SEPARATOR)
    logger.debug("Hashed %d file(s)", len(labelled))
    return digest.hexdigest()


def hash_directory(path: Path, root: Optional[Path] = None) -> str:
    """Hash every non-hidden file below ``path``.

    An empty directory hashes its own path string so it still yields a stable digest.
    """
    files = collect_files(path)
    if not files:
        logger.debug("Directory %s has no visible files; hashing its path", path)
        return hashlib.sha256(os.fsencode(_label(path, root))).hexdigest()
    return hash_many(files, root=root if root is not None else path)


def collect_files(directory: Path) -> List[Path]:
    """Return all non-hidden files below ``directory``, skipping hidden directories entirely."""

    def _raise(exc: OSError) -> None:
        raise FileAccessError(f"Failed to read directory: {exc.filename}: {exc.strerror}") from exc

    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_raise):
        dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
        current = Path(dirpath)
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            files.append(current / filename)
    return files


def _feed_file(digest: "hashlib._Hash", path: Path) -> None:
    try:
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        raise FileAccessError(f"Failed to read file: {path}: {exc.strerror or exc}") from exc


def _label(path: Path, root: Optional[Path]) -> str:
    if root is None:
        return str(path)
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = ["collect_files", "hash_directory", "hash_file", "hash_many"]
