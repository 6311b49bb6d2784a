"""
Rule predicates shared by the fail-fast parser and the full validator.

Each check takes a Collector. FailFast raises on the first report and
Accumulate records every report, so both validators are built from the
same rules and differ only in how violations are collected.
"""

import math
from typing import Any, List, Optional, Type

from levelcode.errors import ErrorKind, LevelCodecError, LevelImportError, ValidationIssue

# Marks a key that is absent from its parent object.
MISSING = object()


def is_number(value: Any) -> bool:
    """True for finite ints and floats; bools are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and not math.isfinite(value))


def is_integer(value: Any) -> bool:
    return is_number(value) and (isinstance(value, int) or value.is_integer())


def in_range(value: Any, lo: Optional[float] = None, hi: Optional[float] = None) -> bool:
    if lo is not None and value < lo:
        return False
    if hi is not None and value > hi:
        return False
    return True


def major_version(version: str) -> str:
    """Leading component of a MAJOR.MINOR.PATCH version string."""
    return version.split(".")[0]


def is_compatible_version(version: str, supported: str) -> bool:
    return major_version(version) == major_version(supported)


class Collector:
    """Receives rule violations."""

    def report(self, field: str, message: str, kind: ErrorKind) -> None:
        raise NotImplementedError

    def check(self, ok: bool, field: str, message: str, kind: ErrorKind) -> bool:
        if not ok:
            self.report(field, message, kind)
        return ok


class FailFast(Collector):
    """Raise the first violation reported."""

    def __init__(self, error_cls: Type[LevelCodecError] = LevelImportError):
        self._error_cls = error_cls

    def report(self, field: str, message: str, kind: ErrorKind) -> None:
        raise self._error_cls(message, kind, field)


class Accumulate(Collector):
    """Record every violation reported."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []

    def report(self, field: str, message: str, kind: ErrorKind) -> None:
        self.issues.append(ValidationIssue(field=field, message=message, kind=kind))


def check_present(
    c: Collector,
    value: Any,
    field: str,
    message: Optional[str] = None,
    kind: ErrorKind = ErrorKind.MISSING_REQUIRED_FIELD,
) -> bool:
    return c.check(value is not MISSING, field, message or f"{field} is required", kind)


def _absent(c: Collector, field: str, message: Optional[str], kind: ErrorKind) -> bool:
    # A caller-supplied message keeps its own kind; otherwise the field is just missing.
    if message:
        return c.check(False, field, message, kind)
    return check_present(c, MISSING, field)


def check_text(
    c: Collector,
    value: Any,
    field: str,
    *,
    min_len: int = 0,
    max_len: Optional[int] = None,
    message: Optional[str] = None,
    kind: ErrorKind = ErrorKind.INVALID_FIELD,
) -> bool:
    """Check that value is a string whose length lies in [min_len, max_len]."""
    if value is MISSING:
        return _absent(c, field, message, kind)
    if not isinstance(value, str):
        return c.check(False, field, message or f"{field} must be a string", kind)
    if len(value) < min_len:
        return c.check(
            False, field, message or f"{field} must contain at least {min_len} character(s)", kind
        )
    if max_len is not None and len(value) > max_len:
        return c.check(
            False, field, message or f"{field} must contain at most {max_len} character(s)", kind
        )
    return True


def check_number(
    c: Collector,
    value: Any,
    field: str,
    *,
    integer: bool = False,
    lo: Optional[float] = None,
    hi: Optional[float] = None,
    message: Optional[str] = None,
    kind: ErrorKind = ErrorKind.INVALID_FIELD,
) -> bool:
    """Check that value is a number (optionally an integer) inside [lo, hi]."""
    if value is MISSING:
        return _absent(c, field, message, kind)
    if not is_number(value):
        return c.check(False, field, message or f"{field} must be a number", kind)
    if integer and not is_integer(value):
        return c.check(False, field, message or f"{field} must be an integer", kind)
    if not in_range(value, lo, hi):
        if lo is not None and hi is not None:
            default = f"{field} must be between {lo} and {hi}"
        elif lo is not None:
            default = f"{field} must be at least {lo}"
        else:
            default = f"{field} must be at most {hi}"
        return c.check(False, field, message or default, kind)
    return True


def check_mapping(
    c: Collector,
    value: Any,
    field: str,
    message: Optional[str] = None,
    kind: ErrorKind = ErrorKind.INVALID_STRUCTURE,
) -> bool:
    if value is MISSING:
        return _absent(c, field, message, kind)
    return c.check(isinstance(value, dict), field, message or f"{field} must be an object", kind)


def check_list(
    c: Collector,
    value: Any,
    field: str,
    message: Optional[str] = None,
    kind: ErrorKind = ErrorKind.INVALID_FIELD,
) -> bool:
    if value is MISSING:
        return _absent(c, field, message, kind)
    return c.check(isinstance(value, list), field, message or f"{field} must be an array", kind)


def check_version(
    c: Collector,
    value: str,
    supported: str,
    field: str = "version",
    message: Optional[str] = None,
) -> bool:
    """Check major-version compatibility of an already type-checked version."""
    default = (
        f"Incompatible version {value}. "
        f"Expected major version {major_version(supported)}.x.x"
    )
    return c.check(
        is_compatible_version(value, supported),
        field,
        message or default,
        ErrorKind.INCOMPATIBLE_VERSION,
    )


def check_member(
    c: Collector,
    ok: bool,
    field: str,
    message: str,
) -> bool:
    return c.check(ok, field, message, ErrorKind.INVALID_CATALOG_VALUE)
