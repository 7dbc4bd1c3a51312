"""
skyfs Encrypted Container Codec

Container layout, in byte order:

    [nonce (24)][metadata (16)][XSalsa20-Poly1305 ciphertext of JSON + zero padding]

The plaintext JSON is zero-padded before encryption so that the whole
container lands exactly on a padded block size (see padding.py).

The metadata region carries the format version in its first byte. It is
not encrypted and sits outside the authenticated ciphertext, so a decoder
can reject an unsupported version before attempting decryption.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from nacl.exceptions import CryptoError
from nacl.secret import SecretBox
from nacl.utils import random as random_bytes

from .encoding import encode_json
from .errors import DecryptionError, OverflowDetectedError, PaddedBlockError, VersionMismatchError
from .padding import check_padded_block, pad_file_size
from .path_seeds import ENCRYPTION_KEY_LENGTH
from .validation import validate_bytes, validate_bytes_len, validate_integer

logger = logging.getLogger(__name__)

# The one supported container format version.
ENCRYPTED_JSON_RESPONSE_VERSION = 1

# Fixed-length, unencrypted region following the nonce.
ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH = 16

ENCRYPTION_NONCE_LENGTH = SecretBox.NONCE_SIZE

# Poly1305 tag added by SecretBox.
ENCRYPTION_OVERHEAD_LENGTH = SecretBox.MACBYTES

_TOTAL_OVERHEAD = ENCRYPTION_NONCE_LENGTH + ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH + ENCRYPTION_OVERHEAD_LENGTH


@dataclass(frozen=True)
class EncryptedFileMetadata:
    version: int


def encode_encrypted_file_metadata(metadata: EncryptedFileMetadata) -> bytes:
    """
    Encode metadata into its fixed-length region.

    Raises:
        OverflowDetectedError: If the version does not fit in a uint8
    """
    validate_integer("metadata.version", metadata.version)
    if metadata.version < 0 or metadata.version > 255:
        raise OverflowDetectedError(f"Metadata version '{metadata.version}' could not be stored in a uint8")

    region = bytearray(ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH)
    region[0] = metadata.version
    return bytes(region)


def decode_encrypted_file_metadata(region: bytes) -> EncryptedFileMetadata:
    validate_bytes_len("region", region, ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH)
    return EncryptedFileMetadata(version=region[0])


def encrypt_json_file(payload: Any, metadata: EncryptedFileMetadata, key: bytes) -> bytes:
    """
    Encrypt a JSON-serializable payload into a padded container.

    Args:
        payload: Any JSON-serializable value
        metadata: Container metadata; version must fit in one byte
        key: 32-byte symmetric key

    Returns:
        Container bytes whose length is a padded block size
    """
    validate_bytes_len("key", key, ENCRYPTION_KEY_LENGTH)
    metadata_bytes = encode_encrypted_file_metadata(metadata)

    data = encode_json("payload", payload)

    # Pad the plaintext so the final container is exactly a padded block.
    final_size = pad_file_size(len(data) + _TOTAL_OVERHEAD) - _TOTAL_OVERHEAD
    data = data + bytes(final_size - len(data))

    nonce = random_bytes(ENCRYPTION_NONCE_LENGTH)
    encrypted = SecretBox(bytes(key)).encrypt(data, nonce)

    container = nonce + metadata_bytes + encrypted.ciphertext
    logger.debug("Encrypted container of %d bytes", len(container))
    return container


def decrypt_json_file(data: bytes, key: bytes) -> Any:
    """
    Decrypt a container produced by encrypt_json_file().

    Raises:
        PaddedBlockError: If the length is not a padded block size
        VersionMismatchError: If the metadata version is unsupported
        DecryptionError: If authentication fails for any reason
    """
    validate_bytes("data", data)
    validate_bytes_len("key", key, ENCRYPTION_KEY_LENGTH)

    if not check_padded_block(len(data)):
        raise PaddedBlockError(len(data), pad_file_size(len(data)))

    data = bytes(data)
    nonce = data[:ENCRYPTION_NONCE_LENGTH]
    metadata_end = ENCRYPTION_NONCE_LENGTH + ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH
    metadata = decode_encrypted_file_metadata(data[ENCRYPTION_NONCE_LENGTH:metadata_end])
    if metadata.version != ENCRYPTED_JSON_RESPONSE_VERSION:
        raise VersionMismatchError(metadata.version, ENCRYPTED_JSON_RESPONSE_VERSION)

    try:
        decrypted = SecretBox(bytes(key)).decrypt(data[metadata_end:], nonce)
    except CryptoError:
        raise DecryptionError() from None

    # Strip the zero-byte padding.
    return json.loads(decrypted.rstrip(b"\x00").decode('utf-8'))
