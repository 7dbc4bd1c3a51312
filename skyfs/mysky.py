"""
skyfs MySky

A per-user facade over the derivation, container and registry layers.

Every instance carries its seed and collaborators explicitly; there is no
process-wide "current user". Keys are recomputed from the seed on each call
and never cached.
"""

import logging
from typing import Any, Optional

from .crypto import DEFAULT_SEED_LENGTH, KeyPair, gen_key_pair_and_seed, gen_key_pair_from_seed
from .path_seeds import derive_encrypted_path_seed, derive_file_seed, derive_root_path_seed
from .registry import RegistryEntry
from .skydb import (
    BlobStore,
    JSONResponse,
    RegistryClient,
    get_json,
    get_json_encrypted,
    set_json,
    set_json_encrypted,
)
from .tweak import derive_discoverable_tweak
from .validation import validate_boolean, validate_string

logger = logging.getLogger(__name__)


class MySky:
    """
    A user's view of their data.

    Usage:
        mysky = MySky(seed, registry, blobs)
        await mysky.set_json_encrypted("app.hns/notes.json", {"text": "hi"})
        response = await mysky.get_json_encrypted("app.hns/notes.json")
    """

    def __init__(self, seed: str, registry: RegistryClient, blobs: BlobStore):
        validate_string("seed", seed)
        self._seed = seed
        self.registry = registry
        self.blobs = blobs

    @classmethod
    def generate(cls, registry: RegistryClient, blobs: BlobStore, length: int = DEFAULT_SEED_LENGTH) -> "MySky":
        """Create an instance for a freshly generated random seed."""
        return cls(gen_key_pair_and_seed(length).seed, registry, blobs)

    def __repr__(self) -> str:
        return f"MySky(user_id={self.user_id()!r})"

    # ==========
    # Identity
    # ==========

    def key_pair(self) -> KeyPair:
        return gen_key_pair_from_seed(self._seed)

    def user_id(self) -> str:
        """The user's public key, under which all their entries are stored."""
        return self.key_pair().public_key

    # ==========
    # Discoverable data
    # ==========

    async def get_json(self, path: str) -> Optional[JSONResponse]:
        data_key = derive_discoverable_tweak(path)
        return await get_json(self.registry, self.blobs, self.user_id(), data_key, True)

    async def set_json(self, path: str, payload: Any, revision: Optional[int] = None) -> RegistryEntry:
        data_key = derive_discoverable_tweak(path)
        return await set_json(
            self.registry, self.blobs, self.key_pair().private_key, data_key, payload, revision, True
        )

    # ==========
    # Encrypted data
    # ==========

    def get_encrypted_path_seed(self, path: str, is_directory: bool) -> str:
        """
        Derive the path seed of `path` from the user's root directory seed.

        The returned seed may be shared to grant read access to that file or
        directory subtree without revealing anything above it.
        """
        validate_string("path", path)
        validate_boolean("is_directory", is_directory)
        return derive_encrypted_path_seed(derive_root_path_seed(self._seed), path, is_directory)

    async def get_json_encrypted(self, path: str) -> Optional[JSONResponse]:
        path_seed = derive_file_seed(derive_root_path_seed(self._seed), path)
        return await get_json_encrypted(self.registry, self.blobs, self.user_id(), path_seed)

    async def set_json_encrypted(self, path: str, payload: Any, revision: Optional[int] = None) -> RegistryEntry:
        path_seed = derive_file_seed(derive_root_path_seed(self._seed), path)
        logger.debug("Publishing encrypted file for user %s", self.user_id())
        return await set_json_encrypted(
            self.registry, self.blobs, self.key_pair().private_key, path_seed, payload, revision
        )
