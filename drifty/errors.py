"""Exception hierarchy shared by drifty components."""

from __future__ import annotations


class DriftError(RuntimeError):
    """Base class for recoverable drifty failures."""


class FileAccessError(DriftError):
    """Raised when a tracked file, directory, or document cannot be read or written."""


class ParseError(DriftError):
    """Raised when a document's front matter contains invalid YAML or an unexpected shape."""


class MalformedBlockError(ParseError):
    """Raised when a front matter block is opened but never closed."""


class ProjectRootNotFoundError(DriftError):
    """Raised when no version-control marker exists above a document."""


class NoMatchError(DriftError):
    """Raised when a watch pattern resolves to zero hashable files."""


class EntryNotFoundError(DriftError):
    """Raised when an entry targeted for update does not exist."""


class BlockNotFoundError(DriftError):
    """Raised when a document lacks the front matter or tracked key an edit needs."""


__all__ = [
    "BlockNotFoundError",
    "DriftError",
    "EntryNotFoundError",
    "FileAccessError",
    "MalformedBlockError",
    "NoMatchError",
    "ParseError",
    "ProjectRootNotFoundError",
]
