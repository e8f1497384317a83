"""Front matter parsing and in-place splicing for tracked documents.

Edits never re-serialise YAML. Each mutation locates an insertion point in
the original text and concatenates slices around it, so comments, quoting,
key order, and line endings authored by the user survive untouched.
"""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import yaml

from .errors import (
    BlockNotFoundError,
    EntryNotFoundError,
    FileAccessError,
    MalformedBlockError,
    ParseError,
)
from .models import TRACKED_KEY, MetadataBlock, WatchEntry

_OPENING_RE = re.compile(r"---[ \t]*\r?\n")
_CLOSING_RE = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)
_TRACKED_KEY_RE = re.compile(rf"^{TRACKED_KEY}:(?P<rest>[^\n]*)$", re.MULTILINE)
_ITEM_INDENT_RE = re.compile(r"([ \t]*)-(?:[ \t]|\r?$)")

# BaseLoader keeps every scalar as text, so these spell "no value".
_NULL_VALUES = {"", "~", "null", "Null", "NULL"}
_EMPTY_INLINE_VALUES = _NULL_VALUES | {"[]"}
_DEFAULT_INDENT = "  "


def parse(content: str) -> Optional[MetadataBlock]:
    """Parse the leading front matter of ``content``.

    Returns None when the document does not open with a ``---`` line.
    """
    opening = _OPENING_RE.match(content)
    if opening is None:
        return None

    body_offset = opening.end()
    closing = _CLOSING_RE.search(content, body_offset)
    if closing is None:
        raise MalformedBlockError("Front matter not closed (missing closing ---)")

    raw_body = content[body_offset:closing.start()]
    return MetadataBlock(
        entries=_parse_entries(raw_body),
        raw_body=raw_body,
        end_offset=closing.end(),
        body_offset=body_offset,
        close_offset=closing.start(),
    )


def parse_file(path: Path) -> Optional[MetadataBlock]:
    return parse(read_document(path))


def has_tracked_block(block: MetadataBlock) -> bool:
    return block.has_tracked_block


def add_empty_block(content: str) -> str:
    """Prepend front matter holding only an empty tracked list."""
    return f"---\n{TRACKED_KEY}:\n---\n{content}"


def promote_to_tracked(content: str) -> str:
    """Add the tracked key just before the closing delimiter of existing front matter."""
    block = parse(content)
    if block is None:
        raise BlockNotFoundError("No front matter found")
    eol = "\r\n" if content[: block.close_offset].endswith("\r\n") else "\n"
    return f"{content[:block.close_offset]}{TRACKED_KEY}:{eol}{content[block.close_offset:]}"


def insert_entry(content: str, pattern: str, digest: str) -> str:
    """Insert a new entry as the first item of the tracked list."""
    block = parse(content)
    if block is None:
        raise BlockNotFoundError("No front matter found")
    if not block.has_tracked_block:
        return insert_entry(promote_to_tracked(content), pattern, digest)

    key = _TRACKED_KEY_RE.search(content, block.body_offset, block.close_offset)
    if key is None:
        raise BlockNotFoundError(
            f"No top-level '{TRACKED_KEY}:' key in front matter; "
            "it may only appear in a comment or a nested mapping"
        )

    key_line = content[key.start():key.end()]
    carriage = "\r" if key_line.endswith("\r") else ""
    inline = _strip_comment(key.group("rest")).strip()
    if inline in _EMPTY_INLINE_VALUES:
        if inline:
            key_line = f"{TRACKED_KEY}:{carriage}"
    else:
        raise BlockNotFoundError(
            f"'{TRACKED_KEY}' uses inline syntax; rewrite it as a block list to add entries"
        )

    # The closing delimiter follows, so the key line always ends in a newline.
    after = content[key.end() + 1:]
    indent = _item_indent(content, block) or _DEFAULT_INDENT

    entry_line = f"{indent}- {_double_quote(pattern)}: {digest}{carriage}\n"
    return f"{content[:key.start()]}{key_line}\n{entry_line}{after}"


def update_entry(content: str, pattern: str, new_hash: str) -> str:
    """Rewrite the stored digest of the first entry whose key matches ``pattern``.

    Double-quoted, single-quoted, and bare keys are recognised. Only the value
    portion of the matching line changes.
    """
    updated, _ = _rewrite_entries(content, pattern, new_hash, limit=1)
    return updated


def update_entries(content: str, pattern: str, new_hash: str) -> Tuple[str, int]:
    """Rewrite every entry keyed by ``pattern`` and return the new text and line count."""
    return _rewrite_entries(content, pattern, new_hash)


def _rewrite_entries(
    content: str, pattern: str, new_hash: str, limit: Optional[int] = None
) -> Tuple[str, int]:
    block = parse(content)
    if block is None:
        raise EntryNotFoundError(f"Entry not found: {pattern}")

    matcher = _entry_line_re(pattern)
    pieces: List[str] = []
    cursor = 0
    count = 0
    for offset, line in _tracked_lines(content, block):
        match = matcher.fullmatch(line)
        if match is None:
            continue
        pieces.append(content[cursor:offset])
        pieces.append(
            f"{match.group('prefix')} {new_hash}{match.group('comment') or ''}{match.group('cr')}"
        )
        cursor = offset + len(line)
        count += 1
        if limit is not None and count >= limit:
            break

    if not count:
        raise EntryNotFoundError(f"Entry not found: {pattern}")
    pieces.append(content[cursor:])
    return "".join(pieces), count


def read_document(path: Path) -> str:
    """Read a document verbatim, keeping its original line endings."""
    try:
        with Path(path).open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path} is not valid UTF-8") from exc
    except OSError as exc:
        raise FileAccessError(f"Failed to read file: {path}: {exc.strerror or exc}") from exc


def write_file(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` via a temporary file and rename."""
    target = Path(path)
    temp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(content)
        if target.exists():
            shutil.copymode(target, temp_path)
        os.replace(temp_path, target)
    except OSError as exc:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise FileAccessError(f"Failed to write file: {target}: {exc.strerror or exc}") from exc


def _parse_entries(raw_body: str) -> List[WatchEntry]:
    try:
        data = yaml.load(raw_body, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ParseError(f"Failed to parse YAML front matter: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, dict):
        raise ParseError("Front matter must be a YAML mapping")

    tracked = data.get(TRACKED_KEY)
    if tracked is None or (isinstance(tracked, str) and tracked in _NULL_VALUES):
        return []
    if not isinstance(tracked, list):
        raise ParseError(f"'{TRACKED_KEY}' must be a list of pattern: hash entries")

    entries: List[WatchEntry] = []
    for item in tracked:
        if not isinstance(item, dict):
            raise ParseError(f"'{TRACKED_KEY}' entries must be single-key mappings, got {item!r}")
        if not item:
            continue
        pattern, value = next(iter(item.items()))
        if value is not None and not isinstance(value, str):
            raise ParseError(f"Hash for '{pattern}' must be a scalar")
        digest = None if value is None or value in _NULL_VALUES else value
        entries.append(WatchEntry(pattern=str(pattern), hash=digest))
    return entries


def _entry_line_re(pattern: str) -> "re.Pattern[str]":
    single_quoted = "'" + pattern.replace("'", "''") + "'"
    keys = "|".join(re.escape(key) for key in (_double_quote(pattern), single_quoted, pattern))
    return re.compile(
        rf"(?P<prefix>[ \t]*-[ \t]+(?:{keys}):)"
        r"(?P<value>[^\r]*?)"
        r"(?P<comment>[ \t]+#[^\r]*)?"
        r"(?P<cr>\r?)"
    )


def _double_quote(pattern: str) -> str:
    escaped = pattern.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _strip_comment(text: str) -> str:
    if text.lstrip().startswith("#"):
        return ""
    head, _, _ = text.partition(" #")
    return head


def _tracked_lines(content: str, block: MetadataBlock) -> Iterator[Tuple[int, str]]:
    """Yield the lines of the tracked list, stopping at the next top-level key."""
    in_tracked = False
    for offset, line in _iter_lines(content, block.body_offset, block.close_offset):
        if line.startswith(f"{TRACKED_KEY}:"):
            in_tracked = True
            continue
        if not in_tracked:
            continue
        stripped = line.strip()
        if stripped and not line[0].isspace() and not stripped.startswith(("-", "#")):
            break
        yield offset, line


def _item_indent(content: str, block: MetadataBlock) -> Optional[str]:
    for _, line in _tracked_lines(content, block):
        item = _ITEM_INDENT_RE.match(line)
        if item is not None:
            return item.group(1)
    return None


def _iter_lines(content: str, start: int, end: int) -> Iterator[Tuple[int, str]]:
    """Yield ``(offset, line)`` pairs without the trailing newline."""
    position = start
    while position < end:
        newline = content.find("\n", position, end)
        if newline == -1:
            newline = end
        yield position, content[position:newline]
        position = newline + 1


__all__ = [
    "add_empty_block",
    "has_tracked_block",
    "insert_entry",
    "parse",
    "parse_file",
    "promote_to_tracked",
    "read_document",
    "update_entries",
    "update_entry",
    "write_file",
]
