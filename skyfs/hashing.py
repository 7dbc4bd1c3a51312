"""
skyfs Hash and KDF Primitives

All hashes are BLAKE2b with a 32-byte digest unless stated otherwise.
Multi-argument hashes are defined over the concatenation of the arguments
in call order; the order is part of every downstream contract.
"""

import hashlib
from typing import Union

from nacl.encoding import RawEncoder
from nacl.hash import blake2b, sha512 as _nacl_sha512

from .encoding import encode_utf8_string
from .validation import validate_bytes, validate_string

HASH_LENGTH = 32

# PBKDF2 parameters are a compatibility contract; never make them configurable.
KDF_SALT = b""
KDF_ITERATIONS = 1000
KDF_KEY_LENGTH = 32


def hash_all(*args: Union[bytes, bytearray]) -> bytes:
    """
    Hash the concatenation of all arguments with BLAKE2b-256.

    Returns:
        32-byte digest
    """
    for i, arg in enumerate(args):
        validate_bytes(f"args[{i}]", arg)
    return blake2b(b"".join(bytes(a) for a in args), digest_size=HASH_LENGTH, encoder=RawEncoder)


def sha512(message: Union[bytes, bytearray, str]) -> bytes:
    """Hash a message with SHA-512. Strings are UTF-8 encoded first."""
    if isinstance(message, str):
        message = message.encode('utf-8')
    validate_bytes("message", message)
    return _nacl_sha512(bytes(message), encoder=RawEncoder)


def hash_data_key(data_key: str) -> bytes:
    """Hash a human-readable registry data key."""
    return hash_all(encode_utf8_string(data_key))


def derive_key(password: str) -> bytes:
    """
    Stretch an arbitrary-length string into 32 bytes of key material.

    PBKDF2-HMAC-SHA256 with an empty salt and 1000 iterations. Slow and
    deterministic.
    """
    validate_string("password", password)
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode('utf-8'), KDF_SALT, KDF_ITERATIONS, KDF_KEY_LENGTH
    )
