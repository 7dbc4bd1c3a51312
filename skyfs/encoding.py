"""
Binary encoding helpers shared by the hashing and registry layers.

Integers are encoded as unsigned 64-bit little-endian; byte strings are
prefixed with their encoded length so that concatenated fields can never
collide across field boundaries.
"""

import base64
import json
from typing import Any, Union

from .errors import OverflowDetectedError
from .validation import (
    throw_validation_error,
    validate_bytes,
    validate_hex_string,
    validate_integer,
    validate_string,
)

MAX_UINT64 = (1 << 64) - 1


def encode_number(num: int) -> bytes:
    """Encode a non-negative integer as 8 little-endian bytes."""
    validate_integer("num", num)
    if num < 0 or num > MAX_UINT64:
        raise OverflowDetectedError(f"Number '{num}' could not be stored in a uint64")
    return num.to_bytes(8, "little")


def encode_prefixed_bytes(data: Union[bytes, bytearray]) -> bytes:
    """Prefix bytes with their length as a uint64."""
    validate_bytes("data", data)
    return encode_number(len(data)) + bytes(data)


def encode_utf8_string(s: str) -> bytes:
    """UTF-8 encode a string and prefix it with its byte length."""
    validate_string("s", s)
    return encode_prefixed_bytes(s.encode("utf-8"))


def to_hex_string(data: Union[bytes, bytearray]) -> str:
    """Lowercase hex, no prefix."""
    return bytes(data).hex()


def hex_to_bytes(name: str, value: str) -> bytes:
    validate_hex_string(name, value)
    if len(value) % 2:
        throw_validation_error(name, value, "a hex-encoded string of even length")
    return bytes.fromhex(value)


def encode_json(name: str, payload: Any) -> bytes:
    """
    Serialize a value as compact UTF-8 JSON.

    NaN and the infinities are rejected; they have no JSON representation.
    """
    try:
        text = json.dumps(payload, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError):
        throw_validation_error(name, payload, "a JSON-serializable value")
    return text.encode('utf-8')


def b64url_encode(b: bytes) -> str:
    """URL-safe base64 encode bytes to string (no padding)."""
    return base64.urlsafe_b64encode(b).rstrip(b'=').decode('ascii')


def b64url_decode(s: str) -> bytes:
    """URL-safe base64 decode string to bytes (handles missing padding)."""
    padding = 4 - (len(s) % 4)
    if padding != 4:
        s += '=' * padding
    return base64.urlsafe_b64decode(s.encode('ascii'))
