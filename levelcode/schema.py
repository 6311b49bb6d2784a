"""
Full and quick validation of level documents.

validate() sanitizes, then checks structure and semantics, and reports every
violation it finds. quick_check() is a cheap boolean pre-filter for decoded,
untrusted payloads.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from levelcode.catalog import DEFAULT_CATALOG, DEFAULT_LIMITS, Catalog, Limits
from levelcode.config import Config
from levelcode.document import LevelDocument
from levelcode.errors import ErrorKind, ValidationIssue
from levelcode.rules import (
    MISSING,
    Accumulate,
    Collector,
    check_list,
    check_mapping,
    check_member,
    check_number,
    check_text,
    check_version,
    is_number,
)
from levelcode.sanitize import sanitize_level

# Coordinates beyond this are out of bounds for any grid and are kept out
# of the int64 arrays used for the semantic checks.
_SAFE_COORD = 2 ** 53


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: a document, or every issue found."""
    document: Optional[LevelDocument] = None
    errors: Tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.errors

    @classmethod
    def failure(cls, errors) -> "ValidationResult":
        return cls(document=None, errors=tuple(errors))

    def messages(self) -> List[str]:
        return [str(e) for e in self.errors]


def validate(
    raw: Any,
    catalog: Catalog = DEFAULT_CATALOG,
    limits: Limits = DEFAULT_LIMITS,
    supported_version: str = Config.FORMAT_VERSION,
) -> ValidationResult:
    """
    Validate and sanitize a raw level tree.

    Args:
        raw: Parsed JSON tree (or a LevelDocument)
        catalog: Block types, power-ups and difficulties to accept
        limits: Numeric bounds for fields
        supported_version: Format version whose major component is accepted

    Returns:
        ValidationResult with the sanitized document, or all issues found
    """
    if isinstance(raw, LevelDocument):
        raw = raw.to_dict()
    c = Accumulate()
    if not isinstance(raw, dict):
        c.report("", "Level data must be an object", ErrorKind.INVALID_STRUCTURE)
        return ValidationResult.failure(c.issues)

    level = sanitize_level(raw)

    check_text(c, level.get("id", MISSING), "id", min_len=1, max_len=limits.max_id_length)
    check_text(c, level.get("name", MISSING), "name", min_len=1, max_len=limits.max_name_length)
    if "author" in level:
        check_text(c, level["author"], "author", max_len=limits.max_author_length)
    for key in ("createdAt", "updatedAt"):
        if key in level:
            check_number(c, level[key], key, integer=True, lo=1)

    version = level.get("version", level.get("formatVersion", MISSING))
    if check_text(c, version, "version"):
        check_version(c, version, supported_version)

    if "metadata" in level and check_mapping(c, level["metadata"], "metadata", kind=ErrorKind.INVALID_FIELD):
        _check_metadata(c, level["metadata"], catalog, limits)

    grid = level.get("grid", MISSING)
    if check_mapping(c, grid, "grid"):
        _check_grid(c, grid, catalog, limits)

    if "settings" in level and check_mapping(c, level["settings"], "settings", kind=ErrorKind.INVALID_FIELD):
        _check_settings(c, level["settings"], limits)

    if c.issues:
        return ValidationResult.failure(c.issues)
    return ValidationResult(document=LevelDocument.from_dict(level))


def _check_metadata(c: Collector, metadata: Dict[str, Any], catalog: Catalog, limits: Limits) -> None:
    if "difficulty" in metadata:
        difficulty = metadata["difficulty"]
        if check_text(c, difficulty, "metadata.difficulty"):
            check_member(
                c, catalog.is_difficulty(difficulty), "metadata.difficulty",
                f"Invalid difficulty '{difficulty}'",
            )
    if "tags" in metadata and check_list(c, metadata["tags"], "metadata.tags"):
        for i, tag in enumerate(metadata["tags"]):
            check_text(c, tag, f"metadata.tags[{i}]")
    if "description" in metadata:
        check_text(
            c, metadata["description"], "metadata.description",
            max_len=limits.max_description_length,
        )


def _check_settings(c: Collector, settings: Dict[str, Any], limits: Limits) -> None:
    if "ballSpeed" in settings:
        check_number(
            c, settings["ballSpeed"], "settings.ballSpeed",
            lo=limits.min_ball_speed, hi=limits.max_ball_speed,
        )
    if "paddleSize" in settings:
        check_number(
            c, settings["paddleSize"], "settings.paddleSize",
            lo=limits.min_paddle_size, hi=limits.max_paddle_size,
        )
    if "theme" in settings:
        check_text(c, settings["theme"], "settings.theme")


def _check_grid(c: Collector, grid: Dict[str, Any], catalog: Catalog, limits: Limits) -> None:
    dims_ok = True
    for key in ("width", "height"):
        dims_ok &= check_number(
            c, grid.get(key, MISSING), f"grid.{key}",
            integer=True, lo=limits.min_grid_size, hi=limits.max_grid_size,
            kind=ErrorKind.INVALID_GRID_DIMENSIONS,
        )

    blocks = grid.get("blocks", MISSING)
    if not check_list(c, blocks, "grid.blocks", kind=ErrorKind.INVALID_BLOCKS_ARRAY):
        return

    positions = []
    for i, block in enumerate(blocks):
        field = f"grid.blocks[{i}]"
        if not check_mapping(c, block, field, kind=ErrorKind.INVALID_BLOCK_PROPERTIES):
            continue
        coords_ok = True
        for axis in ("x", "y"):
            coords_ok &= check_number(
                c, block.get(axis, MISSING), f"{field}.{axis}",
                integer=True, kind=ErrorKind.INVALID_BLOCK_PROPERTIES,
            )
        if coords_ok:
            positions.append((i, block["x"], block["y"]))

        block_type = block.get("type", MISSING)
        if check_text(c, block_type, f"{field}.type", kind=ErrorKind.INVALID_BLOCK_PROPERTIES):
            check_member(
                c, catalog.is_block_type(block_type), f"{field}.type",
                f"Invalid block type '{block_type}'",
            )
        if "health" in block:
            check_number(
                c, block["health"], f"{field}.health",
                integer=True, lo=limits.min_health, hi=limits.max_health,
                kind=ErrorKind.INVALID_BLOCK_PROPERTIES,
            )
        if "powerUp" in block:
            power_up = block["powerUp"]
            if check_text(c, power_up, f"{field}.powerUp", kind=ErrorKind.INVALID_BLOCK_PROPERTIES):
                check_member(
                    c, catalog.is_power_up(power_up), f"{field}.powerUp",
                    f"Invalid power-up '{power_up}'",
                )

    width = int(grid["width"]) if dims_ok else None
    height = int(grid["height"]) if dims_ok else None
    _check_placement(c, positions, width, height)

    if not blocks:
        c.report("grid.blocks", "Level must have at least one block", ErrorKind.TOO_FEW_BLOCKS)
    elif dims_ok and len(blocks) > width * height:
        c.report(
            "grid.blocks",
            f"Too many blocks ({len(blocks)}). Maximum is {width * height}",
            ErrorKind.TOO_MANY_BLOCKS,
        )


def _check_placement(c: Collector, positions, width: Optional[int], height: Optional[int]) -> None:
    """Report out-of-bounds and duplicate blocks; positions are (index, x, y)."""
    if not positions:
        return
    index = np.array([p[0] for p in positions], dtype=np.int64)
    coords = np.array(
        [[_clamp(p[1]), _clamp(p[2])] for p in positions],
        dtype=np.int64,
    )

    # Out-of-bounds blocks, and clamped ones when the grid size is unknown,
    # take no part in duplicate checks.
    inside = np.all(np.abs(coords) < _SAFE_COORD, axis=1)
    if width is not None and height is not None:
        for axis, name, size in ((0, "x", width), (1, "y", height)):
            values = coords[:, axis]
            bad = (values < 0) | (values >= size)
            inside &= ~bad
            for i in np.flatnonzero(bad):
                value = positions[i][axis + 1]
                c.report(
                    f"grid.blocks[{index[i]}].{name}",
                    f"Block {name} position {value} is out of bounds (0-{size - 1})",
                    ErrorKind.OUT_OF_BOUNDS_BLOCK,
                )

    candidates = np.flatnonzero(inside)
    if not len(candidates):
        return
    _, first = np.unique(coords[candidates], axis=0, return_index=True)
    duplicate = np.ones(len(candidates), dtype=bool)
    duplicate[first] = False
    for i in candidates[duplicate]:
        _, x, y = positions[i]
        c.report(
            f"grid.blocks[{index[i]}]",
            f"Duplicate block at position ({x}, {y})",
            ErrorKind.DUPLICATE_BLOCK,
        )


def _clamp(value) -> int:
    return int(max(-_SAFE_COORD, min(_SAFE_COORD, value)))


def quick_check(raw: Any) -> bool:
    """
    Cheap structural pre-filter for untrusted payloads.

    Checks only that id, name and grid exist, that grid width/height are
    numbers within a loose sanity bound, and that grid.blocks is a list.
    """
    if not isinstance(raw, Mapping):
        return False
    if not raw.get("id") or not raw.get("name") or not raw.get("grid"):
        return False
    grid = raw["grid"]
    if not isinstance(grid, Mapping) or not isinstance(grid.get("blocks"), list):
        return False
    width, height = grid.get("width"), grid.get("height")
    if not is_number(width) or not is_number(height):
        return False
    bound = Config.QUICK_CHECK_MAX_GRID
    return 1 <= width <= bound and 1 <= height <= bound


def occupancy(document: LevelDocument) -> np.ndarray:
    """
    Boolean (height, width) map of the cells holding a block.

    Blocks outside the grid are ignored.
    """
    width, height = int(document.grid.width), int(document.grid.height)
    grid = np.zeros((height, width), dtype=bool)
    for block in document.grid.blocks:
        if 0 <= block.x < width and 0 <= block.y < height:
            grid[int(block.y), int(block.x)] = True
    return grid
