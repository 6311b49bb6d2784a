"""
Shareable level codes.

A code is "<checksum>.<payload>": the checksum is a 32-bit rolling hash of
the compact canonical JSON rendered in base 36, and the payload is that JSON
zlib-compressed and encoded as URL-safe base64 without padding.
"""

import base64
import binascii
import json
import logging
import re
import zlib
from dataclasses import dataclass
from typing import Any, Dict, Optional

from levelcode.config import Config
from levelcode.document import Block, Grid, LevelDocument, Metadata
from levelcode.errors import ErrorKind, LevelCodeError

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_CHECKSUM_RE = re.compile(r"[0-9a-z]+")
_PAYLOAD_RE = re.compile(r"[A-Za-z0-9_-]+")

CORRUPTED_MESSAGE = "Level code checksum mismatch - data may be corrupted"


def rolling_hash(text: str) -> int:
    """
    32-bit rolling hash: h = h * 31 + unit, wrapped to a signed 32-bit int.

    Runs over UTF-16 code units so codes agree with browser-generated ones
    for text outside the Basic Multilingual Plane.

    Returns:
        abs() of the final signed value
    """
    h = 0
    for unit in memoryview(text.encode("utf-16-le")).cast("H"):
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def compact_json(document: LevelDocument) -> str:
    """Compact canonical JSON: canonical key order, no extra whitespace."""
    return json.dumps(document.to_dict(), separators=(",", ":"), ensure_ascii=False)


def encode(document: LevelDocument) -> str:
    """
    Encode a document into a shareable code.

    Args:
        document: Level to encode

    Returns:
        "<checksum-base36>.<urlsafe-base64>"

    Example:
        >>> code = encode(doc)
        >>> decode(code) == doc
        True
    """
    text = compact_json(document)
    checksum = rolling_hash(text)
    compressed = zlib.compress(text.encode("utf-8"), Config.COMPRESSION_LEVEL)
    payload = base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")
    return f"{to_base36(checksum)}.{payload}"


def _corrupted() -> LevelCodeError:
    return LevelCodeError(CORRUPTED_MESSAGE, ErrorKind.CHECKSUM_MISMATCH)


def _inflate(data: bytes) -> bytes:
    limit = Config.MAX_INFLATED_BYTES
    inflater = zlib.decompressobj()
    out = inflater.decompress(data, limit + 1)
    if len(out) > limit:
        raise LevelCodeError(
            f"Level code expands beyond {limit} bytes",
            ErrorKind.PAYLOAD_TOO_LARGE,
        )
    if not inflater.eof or inflater.unused_data:
        raise zlib.error("truncated or trailing compressed data")
    return out


def decode_tree(code: str) -> Dict[str, Any]:
    """
    Decode and verify a shareable code into its raw JSON tree.

    Only id, name and grid are required; the rest is left for validation.

    Raises:
        LevelCodeError: InvalidCodeFormat, ChecksumMismatch (any corruption of
            checksum or payload), PayloadTooLarge, MalformedJson or
            InvalidStructure
    """
    code = code.strip()
    if len(code) > Config.MAX_CODE_LENGTH:
        raise LevelCodeError(
            f"Level code exceeds {Config.MAX_CODE_LENGTH} characters",
            ErrorKind.PAYLOAD_TOO_LARGE,
        )
    parts = code.split(".")
    if len(parts) != 2 or not all(parts):
        raise LevelCodeError("Invalid level code format", ErrorKind.INVALID_CODE_FORMAT)
    checksum_str, payload = parts
    if not _CHECKSUM_RE.fullmatch(checksum_str) or not _PAYLOAD_RE.fullmatch(payload):
        raise _corrupted()

    padded = payload + "=" * (-len(payload) % 4)
    try:
        compressed = base64.b64decode(padded.replace("-", "+").replace("_", "/"), validate=True)
        # Unused trailing bits must be zero, or two payloads would decode alike.
        if base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=") != payload:
            raise _corrupted()
        text = _inflate(compressed).decode("utf-8")
    except (binascii.Error, zlib.error, UnicodeDecodeError) as e:
        raise _corrupted() from e

    if rolling_hash(text) != int(checksum_str, 36):
        raise _corrupted()

    try:
        data = json.loads(text)
    except ValueError as e:
        raise LevelCodeError("Level code does not contain JSON", ErrorKind.MALFORMED_JSON) from e

    if not isinstance(data, dict) or not data.get("id") or not data.get("name") or not data.get("grid"):
        raise LevelCodeError("Invalid level data structure", ErrorKind.INVALID_STRUCTURE)
    return data


def decode(code: str) -> LevelDocument:
    """
    Decode and verify a shareable code.

    Raises:
        LevelCodeError: as decode_tree, plus InvalidStructure when the tree
            cannot be read as a document
    """
    data = decode_tree(code)
    try:
        return LevelDocument.from_dict(data)
    except Exception as e:
        raise LevelCodeError(
            f"Invalid level data structure: {e}", ErrorKind.INVALID_STRUCTURE
        ) from e


def code_size(code: str) -> int:
    """Size of a code in bytes (UTF-8)."""
    return len(code.encode("utf-8"))


def is_shareable(code: str, budget: int = Config.SHARE_BUDGET_BYTES) -> bool:
    """Check if a code is within the size limit for URL sharing."""
    return code_size(code) <= budget


def minimal_projection(document: LevelDocument) -> LevelDocument:
    """
    Reduced document for sharing: no tags, description or settings, and
    per-block health only when it differs from the default.
    """
    blocks = tuple(
        Block(
            x=b.x,
            y=b.y,
            type=b.type,
            health=b.health if b.health and b.health != Config.DEFAULT_HEALTH else None,
            power_up=b.power_up or None,
        )
        for b in document.grid.blocks
    )
    return LevelDocument(
        id=document.id,
        name=document.name,
        format_version=document.format_version,
        grid=Grid(width=document.grid.width, height=document.grid.height, blocks=blocks),
        metadata=Metadata(difficulty=document.metadata.difficulty),
        author=document.author,
        created_at=document.created_at,
        updated_at=document.updated_at,
        settings=None,
    )


@dataclass(frozen=True)
class ShareResult:
    """A shareable code plus how it was produced."""
    code: str
    minimal: bool = False
    shareable: bool = True
    warning: Optional[str] = None

    @property
    def size(self) -> int:
        return code_size(self.code)


def encode_for_sharing(document: LevelDocument, budget: int = Config.SHARE_BUDGET_BYTES) -> ShareResult:
    """
    Encode a document, degrading to the minimal projection when over budget.

    Size is a soft constraint: an oversized minimal code is still returned,
    with an advisory warning.
    """
    full = encode(document)
    if is_shareable(full, budget):
        return ShareResult(code=full)

    code = encode(minimal_projection(document))
    used_minimal = len(code) <= len(full)
    if not used_minimal:
        # Never hand back a code longer than the full one.
        code = full
    if is_shareable(code, budget):
        logger.info(
            "Level %s shared in minimal form (%d -> %d bytes)",
            document.id, code_size(full), code_size(code),
        )
        return ShareResult(code=code, minimal=True)

    form = "even in minimal form" if used_minimal else "and the minimal form is no smaller"
    warning = f"Level code is {code_size(code)} bytes, over the {budget} byte URL limit {form}"
    logger.warning("Level %s: %s", document.id, warning)
    return ShareResult(code=code, minimal=used_minimal, shareable=False, warning=warning)
