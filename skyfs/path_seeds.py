"""
skyfs Path Seed Hierarchy

Derives directory and file seeds from a root directory seed and a
slash-delimited logical path.

Directory seeds are 64 bytes (128 hex characters) at every level; only the
final seed of a file is truncated to 32 bytes (64 hex characters). Because
intermediate seeds are never truncated, deriving "a/b" from the root gives
the same seed as deriving "b" from the directory seed of "a":

    derive_file_seed(root, "a/b") == derive_file_seed(derive_directory_seed(root, "a"), "b")

A party holding only a subtree's directory seed can therefore derive every
descendant exactly as the root holder would.
"""

import logging
from typing import List, Optional

from .encoding import hex_to_bytes, to_hex_string
from .hashing import sha512
from .validation import (
    throw_validation_error,
    validate_boolean,
    validate_hex_string,
    validate_string,
)

logger = logging.getLogger(__name__)

# Hex-encoded lengths
ENCRYPTION_PATH_SEED_DIRECTORY_LENGTH = 128
ENCRYPTION_PATH_SEED_FILE_LENGTH = 64

ENCRYPTION_KEY_LENGTH = 32

# Descriptive salts. Changing any of these changes every derived seed.
SALT_ENCRYPTED_CHILD = "encrypted filesystem child"
SALT_ENCRYPTED_TWEAK = "encrypted filesystem tweak"
SALT_ENCRYPTION = "encryption"
SALT_ROOT_PATH_SEED = "root path seed"


class PathSeed(str):
    """Hex-encoded path seed whose length is fixed by its kind."""

    LENGTH = 0
    DESCRIPTION = "a path seed"

    def __new__(cls, value: str):
        validate_hex_string("path_seed", value)
        if len(value) != cls.LENGTH:
            throw_validation_error("path_seed", value, f"{cls.DESCRIPTION} of length '{cls.LENGTH}'")
        return super().__new__(cls, value)

    @property
    def is_directory(self) -> bool:
        return isinstance(self, DirectorySeed)


class DirectorySeed(PathSeed):
    """64-byte seed of a directory."""
    LENGTH = ENCRYPTION_PATH_SEED_DIRECTORY_LENGTH
    DESCRIPTION = "a directory path seed"


class FileSeed(PathSeed):
    """32-byte seed of a file."""
    LENGTH = ENCRYPTION_PATH_SEED_FILE_LENGTH
    DESCRIPTION = "a valid file path seed"


def sanitize_path(path: str) -> Optional[str]:
    """
    Normalize a logical path.

    Surrounding whitespace and empty segments (from repeated, leading or
    trailing slashes) are removed. Returns None if nothing is left.
    """
    names = split_path(path)
    if not names:
        return None
    return "/".join(names)


def split_path(path: str) -> List[str]:
    return [name for name in path.strip().split("/") if name]


def _derive_child(seed_bytes: bytes, name: str, is_directory: bool) -> bytes:
    derivation_path = sha512(seed_bytes + bytes([1 if is_directory else 0]) + name.encode('utf-8'))
    return sha512(sha512(SALT_ENCRYPTED_CHILD) + derivation_path)


def derive_encrypted_path_seed(path_seed: str, sub_path: str, is_directory: bool) -> str:
    """
    Derive the seed of `sub_path` relative to a directory seed.

    Args:
        path_seed: Directory path seed (128 hex characters)
        sub_path: Relative path; "a//b/" is equivalent to "a/b"
        is_directory: Whether the final path component is a directory

    Returns:
        128 hex characters for a directory, 64 for a file
    """
    validate_hex_string("path_seed", path_seed)
    validate_string("sub_path", sub_path)
    validate_boolean("is_directory", is_directory)

    if len(path_seed) != ENCRYPTION_PATH_SEED_DIRECTORY_LENGTH:
        throw_validation_error(
            "path_seed",
            path_seed,
            f"a directory path seed of length '{ENCRYPTION_PATH_SEED_DIRECTORY_LENGTH}'",
        )

    sanitized = sanitize_path(sub_path)
    if sanitized is None:
        throw_validation_error("sub_path", sub_path, "a valid, non-empty path")

    seed_bytes = hex_to_bytes("path_seed", path_seed)
    names = sanitized.split("/")
    for index, name in enumerate(names):
        directory = is_directory if index == len(names) - 1 else True
        seed_bytes = _derive_child(seed_bytes, name, directory)

    # Truncate for files only.
    if not is_directory:
        seed_bytes = seed_bytes[:ENCRYPTION_PATH_SEED_FILE_LENGTH // 2]

    logger.debug("Derived %s seed for %d path segment(s)", "directory" if is_directory else "file", len(names))
    return to_hex_string(seed_bytes)


def derive_directory_seed(path_seed: str, sub_path: str) -> DirectorySeed:
    return DirectorySeed(derive_encrypted_path_seed(path_seed, sub_path, True))


def derive_file_seed(path_seed: str, sub_path: str) -> FileSeed:
    return FileSeed(derive_encrypted_path_seed(path_seed, sub_path, False))


def _validate_file_path_seed(path_seed: str) -> None:
    validate_hex_string("path_seed", path_seed)
    if len(path_seed) != ENCRYPTION_PATH_SEED_FILE_LENGTH:
        throw_validation_error(
            "path_seed",
            path_seed,
            f"a valid file path seed of length '{ENCRYPTION_PATH_SEED_FILE_LENGTH}'",
        )


def derive_encrypted_file_tweak(path_seed: str) -> str:
    """
    Derive the registry data key of a file from its seed.

    The tweak stands in for the human-readable path, so the registry never
    sees it. It is already a hash and is used with hashed_data_key_hex=True.
    """
    _validate_file_path_seed(path_seed)

    data = sha512(SALT_ENCRYPTED_TWEAK) + sha512(path_seed)
    # Registry data keys are 32 bytes.
    return to_hex_string(sha512(data)[:32])


def derive_encrypted_file_key_entropy(path_seed: str) -> bytes:
    """Derive the 32-byte symmetric key used to encrypt a file's container."""
    _validate_file_path_seed(path_seed)

    data = sha512(SALT_ENCRYPTION) + sha512(path_seed)
    return sha512(data)[:ENCRYPTION_KEY_LENGTH]


def derive_root_path_seed(user_seed: str) -> DirectorySeed:
    """Derive the root directory seed of a user's encrypted filesystem."""
    validate_string("user_seed", user_seed)

    data = sha512(SALT_ROOT_PATH_SEED) + sha512(user_seed)
    return DirectorySeed(to_hex_string(sha512(data)))
