"""Interactive selection of drifted entries to accept."""

from __future__ import annotations

from typing import List, Sequence

from prompt_toolkit.shortcuts import checkboxlist_dialog

PROMPT_TEXT = "Select entries to update (space to toggle, enter to confirm)"


def prompt_selection(labels: Sequence[str]) -> List[int]:
    """Show a checkbox list and return the indices the user accepted."""
    if not labels:
        return []
    dialog = checkboxlist_dialog(
        title="drifty check",
        text=PROMPT_TEXT,
        values=[(index, label) for index, label in enumerate(labels)],
    )
    selected = dialog.run()
    return sorted(selected) if selected else []


__all__ = ["PROMPT_TEXT", "prompt_selection"]
