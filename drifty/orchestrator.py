"""Command flows for init/add/check/report/validate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .config import DriftyConfig
from .errors import DriftError, NoMatchError
from .frontmatter import (
    add_empty_block,
    insert_entry,
    parse,
    parse_file,
    promote_to_tracked,
    read_document,
    update_entries,
    write_file,
)
from .logging import get_logger
from .models import DocumentReport, DocumentWarning, EntryResult, MetadataBlock, Status
from .paths import PathResolver
from .scanner import find_documents
from .status import evaluate


@dataclass
class InitOutcome:
    """Result of `drifty init` on one document."""

    path: Path
    action: str  # "initialized", "promoted" or "unchanged"


@dataclass
class AddOutcome:
    """Result of adding a watch pattern to a document."""

    path: Path
    pattern: str
    digest: str
    match_count: int


@dataclass
class CheckSummary:
    """Every evaluated entry of a check run plus documents that were skipped."""

    results: List[EntryResult] = field(default_factory=list)
    warnings: List[DocumentWarning] = field(default_factory=list)

    def with_status(self, status: Status) -> List[EntryResult]:
        return [result for result in self.results if result.status is status]

    @property
    def drifted(self) -> List[EntryResult]:
        return self.with_status(Status.DRIFTED)


@dataclass
class UpdateOutcome:
    """Result of writing accepted digests back into documents."""

    updated: int = 0
    warnings: List[DocumentWarning] = field(default_factory=list)


@dataclass
class ReportSummary:
    reports: List[DocumentReport] = field(default_factory=list)
    warnings: List[DocumentWarning] = field(default_factory=list)

    @property
    def has_problems(self) -> bool:
        return any(report.has_problems for report in self.reports)


@dataclass
class ValidationSummary:
    checked: int = 0
    issues: List[DocumentWarning] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


class Orchestrator:
    """Coordinates the document-level workflows on top of the drift core."""

    def __init__(self, config: DriftyConfig | None = None) -> None:
        self.config = config if config is not None else DriftyConfig(root=Path.cwd())
        self.logger = get_logger("orchestrator")

    def run_init(self, doc_path: Path | str) -> InitOutcome:
        """Give a document an empty tracked list, keeping any existing front matter."""
        path = self._require_file(doc_path)
        content = read_document(path)
        block = parse(content)

        if block is not None and block.has_tracked_block:
            self.logger.debug("%s already tracks entries", path)
            return InitOutcome(path=path, action="unchanged")

        if block is not None:
            write_file(path, promote_to_tracked(content))
            return InitOutcome(path=path, action="promoted")

        write_file(path, add_empty_block(content))
        return InitOutcome(path=path, action="initialized")

    def run_add(self, doc_path: Path | str, pattern: str) -> AddOutcome:
        """Hash ``pattern`` and record it as the newest entry of the document."""
        path = self._require_file(doc_path)
        content = read_document(path)
        block = parse(content)
        if block is None or not block.has_tracked_block:
            raise DriftError(f"File not initialized. Run 'drifty init {path}' first.")
        if block.find(pattern) is not None:
            raise DriftError(f"Pattern '{pattern}' already exists in {path}")

        resolver = self._resolver(path)
        matches = resolver.resolve(pattern)
        if not matches:
            raise NoMatchError(f"Pattern '{pattern}' matches no files")

        digest = resolver.hash_pattern(pattern)
        write_file(path, insert_entry(content, pattern, digest))
        self.logger.debug("Added '%s' to %s (%d match(es))", pattern, path, len(matches))
        return AddOutcome(path=path, pattern=pattern, digest=digest, match_count=len(matches))

    def run_check(self, target: Optional[Path | str] = None) -> CheckSummary:
        """Evaluate every tracked entry of every document under ``target``."""
        summary = CheckSummary()
        for doc_path, block, resolver in self._tracked_documents(target, summary.warnings):
            for entry in block.entries:
                status, digest = evaluate(entry, resolver)
                summary.results.append(
                    EntryResult(doc_path=doc_path, pattern=entry.pattern, status=status, digest=digest)
                )
        return summary

    def apply_updates(self, accepted: Iterable[EntryResult]) -> UpdateOutcome:
        """Persist the freshly computed digests of accepted entries, one write per document.

        Every line of a duplicated pattern shares the same digest, so each
        accepted pattern rewrites all of its lines at once.
        """
        grouped = _group_by_document([result for result in accepted if result.digest is not None])

        outcome = UpdateOutcome()
        for doc_path, results in grouped.items():
            digests = {result.pattern: result.digest or "" for result in results}
            changed = 0
            try:
                content = read_document(doc_path)
                for pattern, digest in digests.items():
                    content, count = update_entries(content, pattern, digest)
                    changed += count
                write_file(doc_path, content)
            except DriftError as exc:
                self.logger.debug("Skipping updates for %s: %s", doc_path, exc)
                outcome.warnings.append(DocumentWarning(doc_path=doc_path, message=str(exc)))
                continue
            outcome.updated += changed
        return outcome

    def run_report(self, target: Optional[Path | str] = None) -> ReportSummary:
        """Collect per-document statuses for reporting."""
        summary = ReportSummary()
        for doc_path, block, resolver in self._tracked_documents(target, summary.warnings):
            report = DocumentReport(doc_path=doc_path)
            for entry in block.entries:
                status, _ = evaluate(entry, resolver)
                report.results.append(EntryResult(doc_path=doc_path, pattern=entry.pattern, status=status))
            if report.results:
                summary.reports.append(report)
        return summary

    def run_validate(self, target: Optional[Path | str] = None) -> ValidationSummary:
        """Check that front matter parses and every entry has a hash and matching files."""
        summary = ValidationSummary()
        for doc_path in self._documents(target):
            try:
                block = parse_file(doc_path)
            except DriftError as exc:
                summary.issues.append(DocumentWarning(doc_path, f"Invalid YAML - {exc}"))
                continue
            if block is None or not block.has_tracked_block:
                continue

            summary.checked += 1
            try:
                resolver = self._resolver(doc_path)
            except DriftError as exc:
                summary.issues.append(DocumentWarning(doc_path, str(exc)))
                continue

            for entry in block.entries:
                if entry.hash is None:
                    summary.issues.append(
                        DocumentWarning(doc_path, f"Entry '{entry.pattern}' has no hash")
                    )
                try:
                    matches = resolver.resolve(entry.pattern)
                except (DriftError, OSError) as exc:
                    summary.issues.append(
                        DocumentWarning(doc_path, f"Pattern '{entry.pattern}' - {exc}")
                    )
                    continue
                if not matches:
                    summary.issues.append(
                        DocumentWarning(doc_path, f"Pattern '{entry.pattern}' matches no files")
                    )
        return summary

    # ------------------------------------------------------------------
    # Internal helpers

    def _documents(self, target: Optional[Path | str]) -> List[Path]:
        documents = self.config.documents
        return find_documents(
            Path(target) if target is not None else None,
            extensions=documents.extensions,
            exclude_paths=documents.exclude_paths,
            base=self.config.root,
        )

    def _tracked_documents(
        self, target: Optional[Path | str], warnings: List[DocumentWarning]
    ) -> Iterator[Tuple[Path, MetadataBlock, PathResolver]]:
        for doc_path in self._documents(target):
            try:
                block = parse_file(doc_path)
            except DriftError as exc:
                self.logger.debug("Skipping %s: %s", doc_path, exc)
                warnings.append(DocumentWarning(doc_path=doc_path, message=str(exc)))
                continue
            if block is None or not block.has_tracked_block:
                continue
            try:
                resolver = self._resolver(doc_path)
            except DriftError as exc:
                self.logger.debug("Skipping %s: %s", doc_path, exc)
                warnings.append(DocumentWarning(doc_path=doc_path, message=str(exc)))
                continue
            yield doc_path, block, resolver

    def _resolver(self, doc_path: Path) -> PathResolver:
        return PathResolver(doc_path, markers=self.config.project.root_markers)

    @staticmethod
    def _require_file(doc_path: Path | str) -> Path:
        path = Path(doc_path)
        if not path.is_file():
            raise FileNotFoundError(f"Invalid file: {path}")
        return path


def _group_by_document(results: Sequence[EntryResult]) -> Dict[Path, List[EntryResult]]:
    grouped: Dict[Path, List[EntryResult]] = {}
    for result in results:
        grouped.setdefault(result.doc_path, []).append(result)
    return grouped


__all__ = [
    "AddOutcome",
    "CheckSummary",
    "InitOutcome",
    "Orchestrator",
    "ReportSummary",
    "UpdateOutcome",
    "ValidationSummary",
]
