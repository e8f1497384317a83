"""Core data models shared across drifty components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

TRACKED_KEY = "driftwatcher"


@dataclass
class WatchEntry:
    """A tracked pattern and the digest recorded when it was last verified."""

    pattern: str
    hash: Optional[str] = None


@dataclass
class MetadataBlock:
    """Parsed front matter plus the offsets needed to splice edits into the source text."""

    entries: List[WatchEntry]
    raw_body: str
    end_offset: int
    body_offset: int = 0
    close_offset: int = 0

    @property
    def has_tracked_block(self) -> bool:
        """Return True when the tracked key is present, even with zero entries."""
        return bool(self.entries) or f"{TRACKED_KEY}:" in self.raw_body

    def find(self, pattern: str) -> Optional[WatchEntry]:
        for entry in self.entries:
            if entry.pattern == pattern:
                return entry
        return None


class Status(str, Enum):
    """Drift classification for a single watch entry."""

    CURRENT = "CURRENT"
    DRIFTED = "DRIFTED"
    MISSING = "MISSING"
    INVALID = "INVALID"

    @property
    def is_problem(self) -> bool:
        return self in (Status.DRIFTED, Status.MISSING)

    def __str__(self) -> str:
        return self.value


@dataclass
class EntryResult:
    """Outcome of evaluating one entry of one document."""

    doc_path: Path
    pattern: str
    status: Status
    digest: Optional[str] = None


@dataclass
class DocumentReport:
    """Evaluated entries for a single tracked document."""

    doc_path: Path
    results: List[EntryResult] = field(default_factory=list)

    @property
    def has_problems(self) -> bool:
        return any(result.status.is_problem for result in self.results)


@dataclass
class DocumentWarning:
    """A document skipped during a batch run, with the reason it was skipped."""

    doc_path: Path
    message: str
