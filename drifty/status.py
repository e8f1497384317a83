"""Drift classification for individual watch entries."""

from __future__ import annotations

from typing import Optional, Tuple

from .errors import DriftError
from .logging import get_logger
from .models import Status, WatchEntry
from .paths import PathResolver

logger = get_logger("status")


def evaluate(entry: WatchEntry, resolver: PathResolver) -> Tuple[Status, Optional[str]]:
    """Classify ``entry`` against the live filesystem.

    The stored hash is checked before the pattern is resolved, so an entry
    without a hash is INVALID even when its pattern also matches nothing.
    The returned digest is populated for CURRENT and DRIFTED entries.
    """
    if entry.hash is None:
        return Status.INVALID, None

    try:
        paths = resolver.resolve(entry.pattern)
    except (DriftError, OSError) as exc:
        logger.debug("Resolution failed for '%s': %s", entry.pattern, exc)
        return Status.MISSING, None
    if not paths:
        return Status.MISSING, None

    try:
        current = resolver.hash_pattern(entry.pattern)
    except (DriftError, OSError) as exc:
        logger.debug("Hashing failed for '%s': %s", entry.pattern, exc)
        return Status.MISSING, None

    if current == entry.hash:
        return Status.CURRENT, current
    return Status.DRIFTED, current


__all__ = ["evaluate"]
