"""
Input validation helpers.

All public skyfs operations validate their inputs here before doing any
cryptographic work, so a malformed call fails fast with a ValidationError
naming the parameter, its actual value and the expected constraint.
"""

import re
from typing import Any, NoReturn

from .errors import ValidationError

_HEX_RE = re.compile(r"[0-9a-f]*")


def throw_validation_error(name: str, value: Any, expected: str, value_kind: str = "parameter") -> NoReturn:
    raise ValidationError(name, value, expected, value_kind)


def validate_string(name: str, value: Any, value_kind: str = "parameter") -> None:
    if not isinstance(value, str):
        throw_validation_error(name, value, "type 'str'", value_kind)


def validate_hex_string(name: str, value: Any, value_kind: str = "parameter") -> None:
    """
    Validate a lowercase hex-encoded string.

    Uppercase digits are rejected. The empty string is accepted here;
    length constraints are checked by the caller so that the error names
    the expected length.
    """
    validate_string(name, value, value_kind)
    if not _HEX_RE.fullmatch(value):
        expected = "a lowercase hex-encoded string" if _HEX_RE.fullmatch(value.lower()) else "a hex-encoded string"
        throw_validation_error(name, value, expected, value_kind)


def validate_boolean(name: str, value: Any, value_kind: str = "parameter") -> None:
    if not isinstance(value, bool):
        throw_validation_error(name, value, "type 'bool'", value_kind)


def validate_integer(name: str, value: Any, value_kind: str = "parameter") -> None:
    # bool is an int subclass but never a valid size or revision
    if isinstance(value, bool) or not isinstance(value, int):
        throw_validation_error(name, value, "type 'int'", value_kind)


def validate_bytes(name: str, value: Any, value_kind: str = "parameter") -> None:
    if not isinstance(value, (bytes, bytearray)):
        throw_validation_error(name, value, "type 'bytes'", value_kind)


def validate_bytes_len(name: str, value: Any, length: int, value_kind: str = "parameter") -> None:
    validate_bytes(name, value, value_kind)
    if len(value) != length:
        throw_validation_error(name, value, f"type 'bytes' of length '{length}'", value_kind)
