"""Documentation drift detection driven by YAML front matter."""

from .errors import (
    BlockNotFoundError,
    DriftError,
    EntryNotFoundError,
    FileAccessError,
    MalformedBlockError,
    NoMatchError,
    ParseError,
    ProjectRootNotFoundError,
)
from .frontmatter import (
    add_empty_block,
    insert_entry,
    parse,
    promote_to_tracked,
    update_entries,
    update_entry,
)
from .hashing import hash_directory, hash_file, hash_many
from .models import MetadataBlock, Status, WatchEntry
from .paths import PathResolver
from .status import evaluate

__version__ = "0.1.0"

__all__ = [
    "BlockNotFoundError",
    "DriftError",
    "EntryNotFoundError",
    "FileAccessError",
    "MalformedBlockError",
    "MetadataBlock",
    "NoMatchError",
    "ParseError",
    "PathResolver",
    "ProjectRootNotFoundError",
    "Status",
    "WatchEntry",
    "__version__",
    "add_empty_block",
    "evaluate",
    "hash_directory",
    "hash_file",
    "hash_many",
    "insert_entry",
    "parse",
    "promote_to_tracked",
    "update_entries",
    "update_entry",
]
