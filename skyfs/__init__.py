"""
skyfs: Hierarchical Encrypted Storage over a Content-Addressed Blob Store

Version: 1.0.0

From a single root secret, skyfs derives an unbounded tree of path-scoped
encryption keys, seals JSON documents into padded, authenticated
containers, and publishes pointers to them through signed, revisioned
registry entries. Two parties holding the same seed (or a shared subtree
seed) recompute the same keys and registry locations without any shared
index.

Usage:
    from skyfs import (
        derive_root_path_seed,
        derive_file_seed,
        derive_encrypted_file_key_entropy,
        encrypt_json_file,
        decrypt_json_file,
        EncryptedFileMetadata,
        ENCRYPTED_JSON_RESPONSE_VERSION,
    )

    root = derive_root_path_seed(user_seed)
    file_seed = derive_file_seed(root, "app.hns/notes.json")
    key = derive_encrypted_file_key_entropy(file_seed)

    container = encrypt_json_file(
        {"text": "hello"},
        EncryptedFileMetadata(version=ENCRYPTED_JSON_RESPONSE_VERSION),
        key,
    )
    assert decrypt_json_file(container, key) == {"text": "hello"}

    # Or, end to end against registry and blob collaborators:
    mysky = MySky(user_seed, registry, blobs)
    await mysky.set_json_encrypted("app.hns/notes.json", {"text": "hello"})
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Errors
from .errors import (
    SkyfsError,
    ValidationError,
    FormatError,
    PaddedBlockError,
    VersionMismatchError,
    DecryptionError,
    SignatureVerificationError,
    OverflowDetectedError,
    ContentNotFoundError,
    RegistryRejectedError,
)

# Hash and KDF primitives
from .hashing import (
    HASH_LENGTH,
    hash_all,
    sha512,
    hash_data_key,
    derive_key,
)

# Seeds and key pairs
from .crypto import (
    DEFAULT_SEED_LENGTH,
    KeyPair,
    KeyPairAndSeed,
    derive_child_seed,
    gen_key_pair_from_seed,
    gen_key_pair_and_seed,
    sign_data,
    verify_signature,
)

# Path seed hierarchy
from .path_seeds import (
    PathSeed,
    DirectorySeed,
    FileSeed,
    ENCRYPTION_PATH_SEED_DIRECTORY_LENGTH,
    ENCRYPTION_PATH_SEED_FILE_LENGTH,
    ENCRYPTION_KEY_LENGTH,
    sanitize_path,
    derive_encrypted_path_seed,
    derive_directory_seed,
    derive_file_seed,
    derive_encrypted_file_tweak,
    derive_encrypted_file_key_entropy,
    derive_root_path_seed,
)

# Padding
from .padding import pad_file_size, check_padded_block

# Encrypted containers
from .encrypted_files import (
    ENCRYPTED_JSON_RESPONSE_VERSION,
    ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH,
    ENCRYPTION_NONCE_LENGTH,
    ENCRYPTION_OVERHEAD_LENGTH,
    EncryptedFileMetadata,
    encode_encrypted_file_metadata,
    decode_encrypted_file_metadata,
    encrypt_json_file,
    decrypt_json_file,
)

# Registry entries
from .registry import (
    MAX_REVISION,
    MAX_ENTRY_LENGTH,
    RegistryEntry,
    SignedRegistryEntry,
    hash_registry_entry,
    sign_registry_entry,
    verify_registry_signature,
)

# Discoverable data keys
from .tweak import derive_discoverable_tweak

# Registry-backed storage
from .skydb import (
    BlobStore,
    RegistryClient,
    InMemoryBlobStore,
    InMemoryRegistry,
    JSONResponse,
    get_next_revision,
    get_or_create_registry_entry,
    get_json,
    set_json,
    get_json_encrypted,
    set_json_encrypted,
)

from .mysky import MySky


__all__ = [
    # Version
    "__version__",

    # Errors
    "SkyfsError",
    "ValidationError",
    "FormatError",
    "PaddedBlockError",
    "VersionMismatchError",
    "DecryptionError",
    "SignatureVerificationError",
    "OverflowDetectedError",
    "ContentNotFoundError",
    "RegistryRejectedError",

    # Hashing
    "HASH_LENGTH",
    "hash_all",
    "sha512",
    "hash_data_key",
    "derive_key",

    # Seeds and key pairs
    "DEFAULT_SEED_LENGTH",
    "KeyPair",
    "KeyPairAndSeed",
    "derive_child_seed",
    "gen_key_pair_from_seed",
    "gen_key_pair_and_seed",
    "sign_data",
    "verify_signature",

    # Path seeds
    "PathSeed",
    "DirectorySeed",
    "FileSeed",
    "ENCRYPTION_PATH_SEED_DIRECTORY_LENGTH",
    "ENCRYPTION_PATH_SEED_FILE_LENGTH",
    "ENCRYPTION_KEY_LENGTH",
    "sanitize_path",
    "derive_encrypted_path_seed",
    "derive_directory_seed",
    "derive_file_seed",
    "derive_encrypted_file_tweak",
    "derive_encrypted_file_key_entropy",
    "derive_root_path_seed",

    # Padding
    "pad_file_size",
    "check_padded_block",

    # Encrypted containers
    "ENCRYPTED_JSON_RESPONSE_VERSION",
    "ENCRYPTION_HIDDEN_FIELD_METADATA_LENGTH",
    "ENCRYPTION_NONCE_LENGTH",
    "ENCRYPTION_OVERHEAD_LENGTH",
    "EncryptedFileMetadata",
    "encode_encrypted_file_metadata",
    "decode_encrypted_file_metadata",
    "encrypt_json_file",
    "decrypt_json_file",

    # Registry
    "MAX_REVISION",
    "MAX_ENTRY_LENGTH",
    "RegistryEntry",
    "SignedRegistryEntry",
    "hash_registry_entry",
    "sign_registry_entry",
    "verify_registry_signature",

    # Tweaks
    "derive_discoverable_tweak",

    # Storage
    "BlobStore",
    "RegistryClient",
    "InMemoryBlobStore",
    "InMemoryRegistry",
    "JSONResponse",
    "get_next_revision",
    "get_or_create_registry_entry",
    "get_json",
    "set_json",
    "get_json_encrypted",
    "set_json_encrypted",

    # Facade
    "MySky",
]
