"""
Export and import canonical level files.

Files are written atomically: the JSON goes to a temp file beside the
target, which then replaces it.
"""

import logging
import os
from pathlib import Path
from typing import Union

from levelcode.catalog import DEFAULT_CATALOG, DEFAULT_LIMITS, Catalog, Limits
from levelcode.config import Config
from levelcode.document import InternalRecord, LevelDocument, LevelSource
from levelcode.errors import ErrorKind, LevelImportError, LevelSaveError
from levelcode.importer import import_json
from levelcode.schema import ValidationResult
from levelcode.transcoder import serialize

logger = logging.getLogger(__name__)


def save_level_file(
    source: Union[LevelSource, InternalRecord, LevelDocument],
    path: Union[str, Path],
) -> Path:
    """
    Write a level to path as canonical JSON.

    Args:
        source: Record or document to export
        path: Output .json path (parent directories are created)

    Returns:
        Path to the written file
    """
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(serialize(source) + "\n", encoding="utf-8")
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as e:
        try:
            if tmp.exists():
                tmp.unlink()
        except OSError:
            logger.debug("Could not remove temp file %s", tmp)
        raise LevelSaveError(f"Failed to save level to {path}: {e}") from e
    logger.info("Saved level to %s", path)
    return path


def load_level_file(
    path: Union[str, Path],
    catalog: Catalog = DEFAULT_CATALOG,
    limits: Limits = DEFAULT_LIMITS,
) -> ValidationResult:
    """
    Read a level file and run it through the full import pipeline.

    Raises:
        LevelImportError: if the file cannot be read or is too large
    """
    path = Path(path)
    try:
        if path.stat().st_size > Config.MAX_IMPORT_BYTES:
            raise LevelImportError(
                f"Level file {path} exceeds {Config.MAX_IMPORT_BYTES} bytes",
                ErrorKind.PAYLOAD_TOO_LARGE,
            )
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LevelImportError(
            f"Failed to load level from {path}: {e}", ErrorKind.INVALID_STRUCTURE
        ) from e
    return import_json(text, catalog, limits)
