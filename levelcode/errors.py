"""Error kinds and exceptions raised by the codec."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MALFORMED_JSON = "MalformedJson"
    INVALID_STRUCTURE = "InvalidStructure"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INCOMPATIBLE_VERSION = "IncompatibleVersion"
    INVALID_GRID_DIMENSIONS = "InvalidGridDimensions"
    INVALID_BLOCKS_ARRAY = "InvalidBlocksArray"
    INVALID_BLOCK_PROPERTIES = "InvalidBlockProperties"
    OUT_OF_BOUNDS_BLOCK = "OutOfBoundsBlock"
    DUPLICATE_BLOCK = "DuplicateBlock"
    TOO_FEW_BLOCKS = "TooFewBlocks"
    TOO_MANY_BLOCKS = "TooManyBlocks"
    INVALID_CATALOG_VALUE = "InvalidCatalogValue"
    INVALID_FIELD = "InvalidField"
    INVALID_CODE_FORMAT = "InvalidCodeFormat"
    CHECKSUM_MISMATCH = "ChecksumMismatch"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"


class LevelCodecError(Exception):
    """Base class for every error reported by levelcode."""

    def __init__(self, message: str, kind: ErrorKind, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.field = field


class LevelImportError(LevelCodecError):
    """Raised by the fail-fast parser on the first violation found."""


class LevelCodeError(LevelCodecError):
    """Raised when a shareable code cannot be decoded."""


class LevelSaveError(LevelCodecError):
    """Raised when a level cannot be written to disk."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.INVALID_STRUCTURE)


@dataclass(frozen=True)
class ValidationIssue:
    """One violation found by the accumulating validator."""
    field: str
    message: str
    kind: ErrorKind

    def __str__(self) -> str:
        if not self.field:
            return self.message
        return f"{self.field}: {self.message}"
