"""
Import pipelines for untrusted level data.

Both paths validate the raw tree rather than a typed document built from
it, so wrong-typed optional fields are reported instead of coerced. The
returned document is sanitized and has passed every semantic rule:

- JSON text: transcoder.parse_tree -> schema.validate
- Shareable code: codec.decode_tree -> schema.quick_check -> schema.validate
"""

import logging
from typing import Union

from levelcode.catalog import DEFAULT_CATALOG, DEFAULT_LIMITS, Catalog, Limits
from levelcode.codec import decode_tree
from levelcode.errors import ErrorKind, LevelCodecError, ValidationIssue
from levelcode.schema import ValidationResult, quick_check, validate
from levelcode.transcoder import parse_tree

logger = logging.getLogger(__name__)


def _failed(error: LevelCodecError) -> ValidationResult:
    issue = ValidationIssue(field=error.field or "", message=error.message, kind=error.kind)
    return ValidationResult.failure([issue])


def import_json(
    text: Union[str, bytes],
    catalog: Catalog = DEFAULT_CATALOG,
    limits: Limits = DEFAULT_LIMITS,
) -> ValidationResult:
    """Parse canonical JSON text and fully validate the parsed tree."""
    try:
        raw = parse_tree(text)
    except LevelCodecError as e:
        logger.debug("JSON import rejected: %s", e.message)
        return _failed(e)
    return validate(raw, catalog, limits)


def import_code(
    code: str,
    catalog: Catalog = DEFAULT_CATALOG,
    limits: Limits = DEFAULT_LIMITS,
) -> ValidationResult:
    """Decode a shareable code and fully validate the decoded tree."""
    try:
        raw = decode_tree(code)
    except LevelCodecError as e:
        logger.debug("Code import rejected: %s", e.message)
        return _failed(e)

    if not quick_check(raw):
        return ValidationResult.failure([
            ValidationIssue(field="grid", message="Invalid level data structure",
                            kind=ErrorKind.INVALID_STRUCTURE),
        ])
    return validate(raw, catalog, limits)
