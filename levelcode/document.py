"""
Level document types.

This module provides the frozen dataclasses for the portable canonical
document (LevelDocument), the richer editor-side record (InternalRecord),
and the explicit tagged union (LevelSource) the transcoder accepts.
"""

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def _freeze(value: Any) -> Any:
    # Lists from JSON become tuples; anything else is kept as-is.
    if isinstance(value, list):
        return tuple(value)
    return value


@dataclass(frozen=True)
class Block:
    """A single block placed on the level grid."""
    x: int
    y: int
    type: str
    health: Optional[int] = None
    power_up: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"x": self.x, "y": self.y, "type": self.type}
        if self.health is not None:
            d["health"] = self.health
        if self.power_up is not None:
            d["powerUp"] = self.power_up
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Block":
        return cls(
            x=d["x"],
            y=d["y"],
            type=d["type"],
            health=d.get("health"),
            power_up=d.get("powerUp"),
        )


@dataclass(frozen=True)
class Grid:
    """Grid dimensions (in cells) and the blocks placed on it."""
    width: int
    height: int
    blocks: Tuple[Block, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "blocks": [b.to_dict() for b in self.blocks],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Grid":
        return cls(
            width=d["width"],
            height=d["height"],
            blocks=tuple(Block.from_dict(b) for b in d.get("blocks", [])),
        )


@dataclass(frozen=True)
class Metadata:
    """Descriptive, optional level metadata."""
    difficulty: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.difficulty is not None:
            d["difficulty"] = self.difficulty
        if isinstance(self.tags, (list, tuple)):
            d["tags"] = list(self.tags)
        elif self.tags is not None:
            # Left as found so validation can report it.
            d["tags"] = self.tags
        if self.description is not None:
            d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Metadata":
        return cls(
            difficulty=d.get("difficulty"),
            tags=_freeze(d.get("tags")),
            description=d.get("description"),
        )


def default_metadata() -> Metadata:
    """Metadata used when a level carries none: no tags, nothing else."""
    return Metadata(tags=())


@dataclass(frozen=True)
class Settings:
    """Gameplay settings; every field is optional."""
    ball_speed: Optional[float] = None
    paddle_size: Optional[float] = None
    theme: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.ball_speed is not None:
            d["ballSpeed"] = self.ball_speed
        if self.paddle_size is not None:
            d["paddleSize"] = self.paddle_size
        if self.theme is not None:
            d["theme"] = self.theme
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Settings":
        return cls(
            ball_speed=d.get("ballSpeed"),
            paddle_size=d.get("paddleSize"),
            theme=d.get("theme"),
        )


@dataclass(frozen=True)
class LevelDocument:
    """
    Canonical, portable level document.

    Required fields:
    - id: Stable level identifier
    - name: Display name
    - format_version: "MAJOR.MINOR.PATCH" (JSON key "version")
    - grid: Dimensions and blocks

    Timestamps are epoch milliseconds. The JSON form uses camelCase keys
    in a fixed order so exported files diff cleanly.
    """
    id: str
    name: str
    format_version: str
    grid: Grid
    metadata: Metadata = field(default_factory=default_metadata)
    author: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    settings: Optional[Settings] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the canonical JSON tree (insertion order is the key order)."""
        d: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.author is not None:
            d["author"] = self.author
        if self.created_at is not None:
            d["createdAt"] = self.created_at
        if self.updated_at is not None:
            d["updatedAt"] = self.updated_at
        d["version"] = self.format_version
        d["metadata"] = self.metadata.to_dict()
        d["grid"] = self.grid.to_dict()
        if self.settings is not None:
            d["settings"] = self.settings.to_dict()
        return d

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "LevelDocument":
        """
        Create a LevelDocument from a canonical JSON tree.

        No defaults beyond empty metadata are applied here; callers that
        want timestamps filled in do so before calling.
        """
        metadata = d.get("metadata")
        settings = d.get("settings")
        return cls(
            id=d["id"],
            name=d["name"],
            format_version=d["version"] if "version" in d else d["formatVersion"],
            grid=Grid.from_dict(d["grid"]),
            metadata=Metadata.from_dict(metadata) if isinstance(metadata, Mapping) else default_metadata(),
            author=d.get("author"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
            settings=Settings.from_dict(settings) if isinstance(settings, Mapping) else None,
        )

    @classmethod
    def from_json(cls, json_str: str) -> "LevelDocument":
        """Create LevelDocument from JSON string."""
        return cls.from_dict(json.loads(json_str))


@dataclass(frozen=True)
class InternalBlock:
    """Editor-side block with presentation fields that never leave the editor."""
    x: int
    y: int
    type: str
    durability: Optional[int] = None
    points: Optional[int] = None
    power_up: Optional[str] = None
    color: Optional[str] = None
    rotation: Optional[float] = None
    metadata: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "InternalBlock":
        return cls(
            x=d["x"],
            y=d["y"],
            type=d["type"],
            durability=d.get("durability"),
            points=d.get("points"),
            power_up=d.get("powerUp"),
            color=d.get("color"),
            rotation=d.get("rotation"),
            metadata=d.get("metadata"),
        )


@dataclass(frozen=True)
class InternalRecord:
    """Level as the editor keeps it: rows/cols plus pixel cell size."""
    id: str
    name: str
    rows: int
    cols: int
    cell_size: int = 32
    blocks: Tuple[InternalBlock, ...] = ()
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "InternalRecord":
        """Create an InternalRecord from the editor's JSON shape."""
        return cls(
            id=d["id"],
            name=d["name"],
            rows=d["rows"],
            cols=d["cols"],
            cell_size=d.get("cellSize", 32),
            blocks=tuple(InternalBlock.from_dict(b) for b in d.get("blocks", [])),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )


class SourceKind(str, Enum):
    RECORD = "record"
    DOCUMENT = "document"


@dataclass(frozen=True)
class LevelSource:
    """Explicitly tagged input to the transcoder."""
    kind: SourceKind
    value: Union[InternalRecord, LevelDocument]

    def __post_init__(self):
        expected = InternalRecord if self.kind is SourceKind.RECORD else LevelDocument
        if not isinstance(self.value, expected):
            raise TypeError(
                f"LevelSource kind {self.kind.value!r} requires {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )

    @classmethod
    def record(cls, value: InternalRecord) -> "LevelSource":
        return cls(SourceKind.RECORD, value)

    @classmethod
    def document(cls, value: LevelDocument) -> "LevelSource":
        return cls(SourceKind.DOCUMENT, value)

    @classmethod
    def of(cls, value: Union["LevelSource", InternalRecord, LevelDocument]) -> "LevelSource":
        """Wrap a bare record or document, dispatching on its type."""
        if isinstance(value, LevelSource):
            return value
        if isinstance(value, InternalRecord):
            return cls.record(value)
        if isinstance(value, LevelDocument):
            return cls.document(value)
        raise TypeError(f"Cannot build a LevelSource from {type(value).__name__}")
