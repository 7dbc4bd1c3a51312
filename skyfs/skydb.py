"""
skyfs Registry-Backed JSON Storage

Stores JSON documents as immutable blobs and publishes a signed, revisioned
pointer to the latest blob in the registry.

Blob upload/download and registry lookup/publication are external
collaborators behind the async BlobStore and RegistryClient interfaces.
In-memory implementations are provided for development and testing.

Revision protocol for every update:

    1. Read the current entry for (public_key, data_key).
    2. No entry: use revision 0.
    3. Entry present: verify its signature (abort on failure), then use
       revision + 1.

This read-verify-increment sequence is the only concurrency control. Two
writers racing on the same key may compute the same revision; the registry
rejects whichever publishes second.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .crypto import public_key_from_private_key
from .encoding import b64url_decode, b64url_encode, encode_json, to_hex_string
from .encrypted_files import (
    ENCRYPTED_JSON_RESPONSE_VERSION,
    EncryptedFileMetadata,
    decrypt_json_file,
    encrypt_json_file,
)
from .errors import (
    ContentNotFoundError,
    DecryptionError,
    OverflowDetectedError,
    RegistryRejectedError,
    SignatureVerificationError,
)
from .hashing import hash_all, hash_data_key
from .logging_config import audit_log
from .path_seeds import derive_encrypted_file_key_entropy, derive_encrypted_file_tweak
from .registry import (
    MAX_REVISION,
    RegistryEntry,
    SignedRegistryEntry,
    sign_registry_entry,
    verify_registry_signature,
)
from .validation import throw_validation_error, validate_string

logger = logging.getLogger(__name__)

# Raw content identifier: 2-byte version/bitfield followed by a 32-byte hash.
CONTENT_ID_PREFIX = b"\x01\x00"
RAW_CONTENT_ID_LENGTH = 34


def content_id_to_bytes(content_id: str) -> bytes:
    validate_string("content_id", content_id)
    try:
        raw = b64url_decode(content_id)
    except ValueError:
        throw_validation_error("content_id", content_id, "a base64url-encoded content identifier")
    if len(raw) != RAW_CONTENT_ID_LENGTH:
        throw_validation_error("content_id", content_id, f"a content identifier of '{RAW_CONTENT_ID_LENGTH}' raw bytes")
    return raw


def bytes_to_content_id(raw: bytes) -> str:
    return b64url_encode(raw)


@dataclass(frozen=True)
class JSONResponse:
    """A fetched JSON document and the registry revision that pointed to it."""
    data: Any
    revision: int


# =============================================================================
# COLLABORATOR INTERFACES
# =============================================================================

class BlobStore(ABC):
    """Content-addressed, immutable blob storage."""

    @abstractmethod
    async def upload(self, data: bytes) -> str:
        """Store bytes and return their content identifier."""
        pass

    @abstractmethod
    async def download(self, content_id: str) -> bytes:
        """Return the bytes stored under a content identifier."""
        pass


class RegistryClient(ABC):
    """Signed, revisioned key-value registry keyed by (public_key, data_key)."""

    @abstractmethod
    async def get_entry(
        self,
        public_key: str,
        data_key: str,
        hashed_data_key_hex: bool = False
    ) -> Optional[SignedRegistryEntry]:
        """Return the current entry, or None if there is none."""
        pass

    @abstractmethod
    async def set_entry(
        self,
        public_key: str,
        signed: SignedRegistryEntry,
        hashed_data_key_hex: bool = False
    ) -> None:
        """Publish a signed entry."""
        pass


class InMemoryBlobStore(BlobStore):
    """
    In-memory blob store for development/testing.

    WARNING: Not persistent.
    """

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    async def upload(self, data: bytes) -> str:
        raw = CONTENT_ID_PREFIX + hash_all(bytes(data))
        content_id = bytes_to_content_id(raw)
        with self._lock:
            self._blobs[content_id] = bytes(data)
        return content_id

    async def download(self, content_id: str) -> bytes:
        with self._lock:
            data = self._blobs.get(content_id)
        if data is None:
            raise ContentNotFoundError(content_id)
        return data


class InMemoryRegistry(RegistryClient):
    """
    In-memory registry for development/testing.

    Enforces what a real registry enforces: valid signatures and strictly
    increasing revisions per (public_key, data_key).

    WARNING: Not persistent.
    """

    def __init__(self):
        # (public_key, hashed data key hex) -> (data, revision, signature)
        self._entries: Dict[Tuple[str, str], Tuple[bytes, int, bytes]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _storage_key(public_key: str, data_key: str, hashed_data_key_hex: bool) -> Tuple[str, str]:
        if hashed_data_key_hex:
            return public_key, data_key
        return public_key, to_hex_string(hash_data_key(data_key))

    async def get_entry(
        self,
        public_key: str,
        data_key: str,
        hashed_data_key_hex: bool = False
    ) -> Optional[SignedRegistryEntry]:
        with self._lock:
            stored = self._entries.get(self._storage_key(public_key, data_key, hashed_data_key_hex))
        if stored is None:
            return None

        data, revision, signature = stored
        return SignedRegistryEntry(
            entry=RegistryEntry(data_key=data_key, data=data, revision=revision),
            signature=signature,
        )

    async def set_entry(
        self,
        public_key: str,
        signed: SignedRegistryEntry,
        hashed_data_key_hex: bool = False
    ) -> None:
        if not verify_registry_signature(signed, public_key, hashed_data_key_hex):
            raise RegistryRejectedError("invalid signature")

        key = self._storage_key(public_key, signed.entry.data_key, hashed_data_key_hex)
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None and signed.entry.revision <= existing[1]:
                raise RegistryRejectedError(
                    f"revision '{signed.entry.revision}' is not greater than current revision '{existing[1]}'"
                )
            self._entries[key] = (signed.entry.data, signed.entry.revision, signed.signature)


# =============================================================================
# REVISION PROTOCOL
# =============================================================================

async def get_verified_entry(
    registry: RegistryClient,
    public_key: str,
    data_key: str,
    hashed_data_key_hex: bool = False
) -> Optional[SignedRegistryEntry]:
    """
    Fetch the current entry and verify it against the owner's public key.

    Raises:
        SignatureVerificationError: If an entry exists but does not verify
    """
    signed = await registry.get_entry(public_key, data_key, hashed_data_key_hex)
    if signed is None:
        audit_log.registry_lookup(public_key, data_key, found=False)
        return None

    audit_log.registry_lookup(public_key, data_key, found=True, revision=signed.entry.revision)
    if not verify_registry_signature(signed, public_key, hashed_data_key_hex):
        audit_log.signature_rejected(public_key, data_key, signed.entry.revision)
        raise SignatureVerificationError()
    return signed


async def get_next_revision(
    registry: RegistryClient,
    public_key: str,
    data_key: str,
    hashed_data_key_hex: bool = False
) -> int:
    """
    Return the revision the next update of (public_key, data_key) must use.

    Raises:
        SignatureVerificationError: If the current entry does not verify
        OverflowDetectedError: If the current entry is at the maximum revision
    """
    signed = await get_verified_entry(registry, public_key, data_key, hashed_data_key_hex)
    if signed is None:
        return 0

    revision = signed.entry.revision
    if revision >= MAX_REVISION:
        raise OverflowDetectedError("Current entry already has maximum allowed revision, could not update the entry")
    return revision + 1


async def get_or_create_registry_entry(
    registry: RegistryClient,
    public_key: str,
    data_key: str,
    data: bytes,
    revision: Optional[int] = None,
    hashed_data_key_hex: bool = False
) -> RegistryEntry:
    """
    Build the next entry for (public_key, data_key).

    If `revision` is given it is used as-is and the registry is not read.
    """
    if revision is None:
        revision = await get_next_revision(registry, public_key, data_key, hashed_data_key_hex)
    return RegistryEntry(data_key=data_key, data=data, revision=revision)


async def _publish(
    registry: RegistryClient,
    blobs: BlobStore,
    private_key: str,
    data_key: str,
    payload: bytes,
    revision: Optional[int],
    hashed_data_key_hex: bool
) -> RegistryEntry:
    public_key = public_key_from_private_key(private_key)

    # Resolve the revision before uploading so a bad prior entry aborts early.
    if revision is None:
        revision = await get_next_revision(registry, public_key, data_key, hashed_data_key_hex)

    content_id = await blobs.upload(payload)
    logger.debug("Uploaded %d bytes as %s", len(payload), content_id)
    entry = RegistryEntry(data_key=data_key, data=content_id_to_bytes(content_id), revision=revision)
    signed = sign_registry_entry(entry, private_key, hashed_data_key_hex)
    await registry.set_entry(public_key, signed, hashed_data_key_hex)

    audit_log.registry_update(public_key, data_key, entry.revision)
    return entry


# =============================================================================
# JSON OPERATIONS
# =============================================================================

async def get_json(
    registry: RegistryClient,
    blobs: BlobStore,
    public_key: str,
    data_key: str,
    hashed_data_key_hex: bool = False
) -> Optional[JSONResponse]:
    """Fetch the JSON document currently published under a data key."""
    signed = await get_verified_entry(registry, public_key, data_key, hashed_data_key_hex)
    if signed is None:
        return None

    raw = await blobs.download(bytes_to_content_id(signed.entry.data))
    return JSONResponse(data=json.loads(raw.decode('utf-8')), revision=signed.entry.revision)


async def set_json(
    registry: RegistryClient,
    blobs: BlobStore,
    private_key: str,
    data_key: str,
    payload: Any,
    revision: Optional[int] = None,
    hashed_data_key_hex: bool = False
) -> RegistryEntry:
    """Upload a JSON document and publish it under a data key."""
    data = encode_json("payload", payload)
    return await _publish(registry, blobs, private_key, data_key, data, revision, hashed_data_key_hex)


async def get_json_encrypted(
    registry: RegistryClient,
    blobs: BlobStore,
    public_key: str,
    path_seed: str
) -> Optional[JSONResponse]:
    """
    Fetch and decrypt the JSON document of a file path seed.

    Raises:
        DecryptionError: If the container does not authenticate
    """
    data_key = derive_encrypted_file_tweak(path_seed)
    signed = await get_verified_entry(registry, public_key, data_key, True)
    if signed is None:
        return None

    container = await blobs.download(bytes_to_content_id(signed.entry.data))
    try:
        data = decrypt_json_file(container, derive_encrypted_file_key_entropy(path_seed))
    except DecryptionError:
        audit_log.decryption_failed(data_key, len(container))
        raise
    return JSONResponse(data=data, revision=signed.entry.revision)


async def set_json_encrypted(
    registry: RegistryClient,
    blobs: BlobStore,
    private_key: str,
    path_seed: str,
    payload: Any,
    revision: Optional[int] = None
) -> RegistryEntry:
    """Encrypt a JSON document under a file path seed and publish it."""
    data_key = derive_encrypted_file_tweak(path_seed)
    metadata = EncryptedFileMetadata(version=ENCRYPTED_JSON_RESPONSE_VERSION)
    container = encrypt_json_file(payload, metadata, derive_encrypted_file_key_entropy(path_seed))
    return await _publish(registry, blobs, private_key, data_key, container, revision, True)
