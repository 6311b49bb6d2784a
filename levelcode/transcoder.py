"""
Canonical transcoding between level sources and canonical JSON text.

serialize() projects an editor record (or passes a document through) into
the canonical tree and pretty-prints it. parse() is the fail-fast reader:
it reports the first structural problem only, and does no sanitization or
semantic checking. Untrusted text must also go through schema.validate().
"""

import json
import logging
from typing import Any, Dict, Union

from levelcode.config import Config
from levelcode.document import (
    InternalRecord,
    LevelDocument,
    LevelSource,
    SourceKind,
    now_ms,
)
from levelcode.errors import ErrorKind, LevelImportError
from levelcode.rules import (
    MISSING,
    FailFast,
    check_list,
    check_mapping,
    check_number,
    check_text,
    check_version,
    is_number,
)

logger = logging.getLogger(__name__)

Source = Union[LevelSource, InternalRecord, LevelDocument]


def _project_record(record: InternalRecord) -> Dict[str, Any]:
    # Lossy: points, color, rotation, block metadata and cell_size are dropped.
    blocks = []
    for b in record.blocks:
        block: Dict[str, Any] = {"x": b.x, "y": b.y, "type": b.type}
        if b.durability is not None:
            block["health"] = b.durability
        if b.power_up is not None:
            block["powerUp"] = b.power_up
        blocks.append(block)

    now = now_ms()
    return {
        "id": record.id,
        "name": record.name,
        "createdAt": record.created_at if record.created_at is not None else now,
        "updatedAt": record.updated_at if record.updated_at is not None else now,
        "version": Config.FORMAT_VERSION,
        "metadata": {"tags": []},
        "grid": {
            "width": record.cols,
            "height": record.rows,
            "blocks": blocks,
        },
    }


def to_canonical(source: Source) -> Dict[str, Any]:
    """
    Build the canonical JSON tree for a record or document.

    Args:
        source: LevelSource, or a bare InternalRecord / LevelDocument

    Returns:
        Dict in canonical key order
    """
    source = LevelSource.of(source)
    if source.kind is SourceKind.RECORD:
        return _project_record(source.value)
    return source.value.to_dict()


def serialize(source: Source, indent: int = Config.JSON_INDENT) -> str:
    """Serialize a source to pretty-printed canonical JSON."""
    return json.dumps(to_canonical(source), indent=indent, ensure_ascii=False)


def parse_tree(text: Union[str, bytes], supported_version: str = Config.FORMAT_VERSION) -> Dict[str, Any]:
    """
    Parse canonical JSON text into a checked tree, failing on the first violation.

    Checks, in order: JSON object, id, name, version, major version, grid,
    grid dimensions, blocks array, block properties. Absent timestamps
    default to now and absent metadata to empty tags. Everything else is
    left as found, wrong types included, for schema.validate to report.

    Raises:
        LevelImportError: first violation found
    """
    if len(text) > Config.MAX_IMPORT_BYTES:
        raise LevelImportError(
            f"Level data exceeds {Config.MAX_IMPORT_BYTES} bytes",
            ErrorKind.PAYLOAD_TOO_LARGE,
        )
    try:
        data = json.loads(text)
    except (ValueError, TypeError) as e:
        raise LevelImportError("Invalid JSON format", ErrorKind.MALFORMED_JSON) from e

    c = FailFast(LevelImportError)
    check_mapping(c, data, "", "Invalid level data structure")
    check_text(c, data.get("id", MISSING), "id", min_len=1,
               message="Missing or invalid level ID", kind=ErrorKind.MISSING_REQUIRED_FIELD)
    check_text(c, data.get("name", MISSING), "name", min_len=1,
               message="Missing or invalid level name", kind=ErrorKind.MISSING_REQUIRED_FIELD)

    version = data.get("version", data.get("formatVersion", MISSING))
    check_text(c, version, "version",
               message="Missing or invalid version", kind=ErrorKind.MISSING_REQUIRED_FIELD)
    check_version(c, version, supported_version,
                  message=f"Incompatible version: {version} (expected {supported_version})")

    grid = data.get("grid", MISSING)
    check_mapping(c, grid, "grid", "Missing or invalid grid data", ErrorKind.MISSING_REQUIRED_FIELD)
    for key in ("width", "height"):
        check_number(c, grid.get(key, MISSING), f"grid.{key}",
                     message="Invalid grid dimensions", kind=ErrorKind.INVALID_GRID_DIMENSIONS)
    blocks = grid.get("blocks", MISSING)
    check_list(c, blocks, "grid.blocks", "Invalid blocks array", ErrorKind.INVALID_BLOCKS_ARRAY)

    for i, block in enumerate(blocks):
        field = f"grid.blocks[{i}]"
        check_mapping(c, block, field, "Invalid block data", ErrorKind.INVALID_BLOCK_PROPERTIES)
        for axis in ("x", "y"):
            check_number(c, block.get(axis, MISSING), f"{field}.{axis}",
                         message="Invalid block properties", kind=ErrorKind.INVALID_BLOCK_PROPERTIES)
        check_text(c, block.get("type", MISSING), f"{field}.type",
                   message="Invalid block properties", kind=ErrorKind.INVALID_BLOCK_PROPERTIES)

    now = now_ms()
    level = dict(data)
    level["version"] = version
    level.pop("formatVersion", None)
    for key in ("createdAt", "updatedAt"):
        level.setdefault(key, now)
    level.setdefault("metadata", {"tags": []})
    return level


def parse(text: Union[str, bytes], supported_version: str = Config.FORMAT_VERSION) -> LevelDocument:
    """
    Parse canonical JSON text into a LevelDocument.

    Lenient on optional fields: a non-string author or non-object settings
    is dropped, non-numeric timestamps become now and non-object metadata
    becomes empty tags. No sanitization or semantic checks.

    Raises:
        LevelImportError: first violation found
    """
    level = parse_tree(text, supported_version)
    now = now_ms()
    if not isinstance(level.get("author"), str):
        level.pop("author", None)
    for key in ("createdAt", "updatedAt"):
        if not is_number(level[key]):
            level[key] = now
    if not isinstance(level["metadata"], dict):
        level["metadata"] = {"tags": []}
    if not isinstance(level.get("settings"), dict):
        level.pop("settings", None)

    document = LevelDocument.from_dict(level)
    logger.debug("Parsed level %s with %d blocks", document.id, len(document.grid.blocks))
    return document

