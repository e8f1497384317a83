from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.doc_repo import DocRepoBuilder


@pytest.fixture
def doc_repo(tmp_path: Path) -> DocRepoBuilder:
    """Provide a repository with a `.git` marker rooted at the pytest tmp_path."""
    return DocRepoBuilder(tmp_path)
