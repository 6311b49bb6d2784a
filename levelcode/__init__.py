"""
levelcode - Portable, shareable level documents for the block editor.

A level travels in two forms:
- canonical JSON (pretty-printed, versioned, diff-friendly files)
- shareable codes ("<checksum>.<payload>", compressed and URL-safe)

Imports from either form are sanitized and fully validated before use.
"""

__version__ = "0.1.0"

from levelcode.catalog import Catalog, Limits, DEFAULT_CATALOG, DEFAULT_LIMITS
from levelcode.codec import decode, decode_tree, encode, encode_for_sharing, is_shareable, minimal_projection
from levelcode.document import (
    Block, Grid, InternalBlock, InternalRecord, LevelDocument, LevelSource, Metadata, Settings,
)
from levelcode.errors import ErrorKind, LevelCodecError, LevelCodeError, LevelImportError
from levelcode.importer import import_code, import_json
from levelcode.schema import ValidationResult, occupancy, quick_check, validate
from levelcode.transcoder import parse, parse_tree, serialize

__all__ = [
    "Catalog",
    "Limits",
    "DEFAULT_CATALOG",
    "DEFAULT_LIMITS",
    "encode",
    "decode",
    "decode_tree",
    "encode_for_sharing",
    "is_shareable",
    "minimal_projection",
    "Block",
    "Grid",
    "InternalBlock",
    "InternalRecord",
    "LevelDocument",
    "LevelSource",
    "Metadata",
    "Settings",
    "ErrorKind",
    "LevelCodecError",
    "LevelCodeError",
    "LevelImportError",
    "import_code",
    "import_json",
    "ValidationResult",
    "occupancy",
    "quick_check",
    "validate",
    "parse",
    "parse_tree",
    "serialize",
]
