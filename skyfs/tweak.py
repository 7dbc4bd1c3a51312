"""
Discoverable (unencrypted) data keys.

Public data is stored under a tweak computed from its path alone, so anyone
who knows the owner's public key and the path can locate it.
"""

from dataclasses import dataclass, field
from typing import List

from .encoding import to_hex_string
from .hashing import hash_all
from .validation import validate_string

DISCOVERABLE_BUCKET_TWEAK_VERSION = 1


def hash_path_component(component: str) -> bytes:
    return hash_all(component.encode('utf-8'))


@dataclass
class DiscoverableBucketTweak:
    """Versioned list of path component hashes."""
    path: List[bytes] = field(default_factory=list)
    version: int = DISCOVERABLE_BUCKET_TWEAK_VERSION

    @classmethod
    def from_path(cls, path: str) -> "DiscoverableBucketTweak":
        return cls(path=[hash_path_component(c) for c in path.split("/")])

    def encode(self) -> bytes:
        return bytes([self.version]) + b"".join(self.path)

    def get_hash(self) -> bytes:
        return hash_all(self.encode())


def derive_discoverable_tweak(path: str) -> str:
    """
    Derive the hex-encoded data key for a discoverable path.

    Unlike encrypted path seeds, the path is not normalized: "a//b" and
    "a/b" are different buckets.
    """
    validate_string("path", path)
    return to_hex_string(DiscoverableBucketTweak.from_path(path).get_hash())
