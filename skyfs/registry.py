"""
skyfs Registry Entry Canonicalization and Signing

A registry entry is a (data_key, data, revision) triple stored under the
owner's public key. Its canonical hash is

    blake2b-256(data_key_bytes || u64le(len(data)) || data || u64le(revision))

where data_key_bytes is the hex-decoded data key if the caller asserts it
is already a hash (e.g. a file tweak), or the hash of the UTF-8 data key
otherwise. Callers must be explicit: hashing the wrong representation
silently produces an entry that no one else can verify.

Signatures are Ed25519 over the 32-byte canonical hash.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .crypto import sign_data, verify_signature
from .encoding import encode_number, encode_prefixed_bytes, hex_to_bytes, to_hex_string
from .hashing import hash_all, hash_data_key
from .validation import (
    throw_validation_error,
    validate_boolean,
    validate_bytes,
    validate_integer,
    validate_string,
)

MAX_REVISION = (1 << 64) - 1

# Maximum length of the data stored in a single entry.
MAX_ENTRY_LENGTH = 70


@dataclass(frozen=True)
class RegistryEntry:
    """A versioned pointer record. `data` is normally a raw content identifier."""
    data_key: str
    data: bytes
    revision: int

    def __post_init__(self):
        validate_string("data_key", self.data_key, "field")
        validate_bytes("data", self.data, "field")
        if len(self.data) > MAX_ENTRY_LENGTH:
            throw_validation_error("data", self.data, f"at most '{MAX_ENTRY_LENGTH}' bytes", "field")
        validate_integer("revision", self.revision, "field")
        if self.revision < 0 or self.revision > MAX_REVISION:
            throw_validation_error("revision", self.revision, "a uint64", "field")
        object.__setattr__(self, "data", bytes(self.data))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data_key": self.data_key,
            "data": to_hex_string(self.data),
            "revision": self.revision,
        }


@dataclass(frozen=True)
class SignedRegistryEntry:
    """A registry entry together with its owner's signature."""
    entry: RegistryEntry
    signature: bytes

    def __post_init__(self):
        validate_bytes("signature", self.signature, "field")
        object.__setattr__(self, "signature", bytes(self.signature))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry": self.entry.to_dict(),
            "signature": to_hex_string(self.signature),
        }


def hash_registry_entry(entry: RegistryEntry, hashed_data_key_hex: bool) -> bytes:
    """
    Compute the canonical 32-byte hash of a registry entry.

    Args:
        entry: The entry to hash
        hashed_data_key_hex: True if entry.data_key is already a hex-encoded hash
    """
    validate_boolean("hashed_data_key_hex", hashed_data_key_hex)

    if hashed_data_key_hex:
        data_key_bytes = hex_to_bytes("data_key", entry.data_key)
    else:
        data_key_bytes = hash_data_key(entry.data_key)

    return hash_all(
        data_key_bytes,
        encode_prefixed_bytes(entry.data),
        encode_number(entry.revision),
    )


def sign_registry_entry(entry: RegistryEntry, private_key: str, hashed_data_key_hex: bool) -> SignedRegistryEntry:
    """Sign an entry's canonical hash with a hex-encoded private key."""
    signature = sign_data(hash_registry_entry(entry, hashed_data_key_hex), private_key)
    return SignedRegistryEntry(entry=entry, signature=signature)


def verify_registry_signature(
    signed: SignedRegistryEntry,
    public_key: str,
    hashed_data_key_hex: bool
) -> bool:
    """
    Verify a signed entry against the claimed owner's public key.

    Revision monotonicity is not certified by the signature; see
    skydb.get_next_revision() for the read-verify-increment protocol.
    """
    return verify_signature(
        hash_registry_entry(signed.entry, hashed_data_key_hex),
        signed.signature,
        public_key,
    )
