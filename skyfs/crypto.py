"""
skyfs Seed and Key-Pair Derivation

Uses Ed25519 (RFC 8032) via PyNaCl. Key pairs are a pure function of their
seed; fresh entropy only enters through gen_key_pair_and_seed().
"""

import logging
from dataclasses import dataclass

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey
from nacl.utils import random as random_bytes

from .encoding import encode_utf8_string, hex_to_bytes, to_hex_string
from .hashing import derive_key, hash_all
from .validation import throw_validation_error, validate_bytes, validate_integer, validate_string

logger = logging.getLogger(__name__)

# Hex lengths
PUBLIC_KEY_LENGTH = 64
PRIVATE_KEY_LENGTH = 128

# Raw bytes
SIGNATURE_LENGTH = 64

# Bytes of entropy in a freshly generated seed
DEFAULT_SEED_LENGTH = 64


@dataclass(frozen=True)
class KeyPair:
    """
    Ed25519 key pair, hex-encoded.

    private_key uses the NaCl secret-key layout: 32-byte seed followed by
    the 32-byte public key.
    """
    public_key: str
    private_key: str

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key!r}, private_key=<redacted>)"


@dataclass(frozen=True)
class KeyPairAndSeed(KeyPair):
    """Key pair plus the random seed it was generated from."""
    seed: str = ""

    def __repr__(self) -> str:
        return f"KeyPairAndSeed(public_key={self.public_key!r}, private_key=<redacted>, seed=<redacted>)"


def derive_child_seed(master_seed: str, seed: str) -> str:
    """
    Derive a child seed from a master seed and a sub seed.

    Non-commutative: swapping the arguments yields an unrelated result.
    """
    validate_string("master_seed", master_seed)
    validate_string("seed", seed)

    return to_hex_string(hash_all(encode_utf8_string(master_seed), encode_utf8_string(seed)))


def gen_key_pair_from_seed(seed: str) -> KeyPair:
    """
    Generate an Ed25519 key pair from a secure seed.

    The seed is stretched to 32 bytes with PBKDF2 and used as the Ed25519
    private seed.
    """
    validate_string("seed", seed)

    derived = derive_key(seed)
    signing_key = SigningKey(derived)
    public_key = bytes(signing_key.verify_key)

    return KeyPair(
        public_key=to_hex_string(public_key),
        private_key=to_hex_string(derived + public_key),
    )


def gen_key_pair_and_seed(length: int = DEFAULT_SEED_LENGTH) -> KeyPairAndSeed:
    """
    Generate a random seed of `length` bytes and its key pair.

    The hex seed is twice as long as `length`.
    """
    validate_integer("length", length)
    if length <= 0:
        throw_validation_error("length", length, "a positive integer")

    seed = to_hex_string(random_bytes(length))
    key_pair = gen_key_pair_from_seed(seed)
    logger.debug("Generated key pair %s from %d-byte seed", key_pair.public_key, length)

    return KeyPairAndSeed(public_key=key_pair.public_key, private_key=key_pair.private_key, seed=seed)


def signing_key_from_private_key(private_key: str) -> SigningKey:
    if len(private_key) != PRIVATE_KEY_LENGTH:
        throw_validation_error("private_key", "<redacted>", f"a private key of length '{PRIVATE_KEY_LENGTH}'")
    key_bytes = hex_to_bytes("private_key", private_key)
    return SigningKey(key_bytes[:32])


def public_key_from_private_key(private_key: str) -> str:
    return to_hex_string(bytes(signing_key_from_private_key(private_key).verify_key))


def verify_key_from_public_key(public_key: str) -> VerifyKey:
    if not isinstance(public_key, str) or len(public_key) != PUBLIC_KEY_LENGTH:
        throw_validation_error("public_key", public_key, f"a public key of length '{PUBLIC_KEY_LENGTH}'")
    return VerifyKey(hex_to_bytes("public_key", public_key))


def sign_data(data: bytes, private_key: str) -> bytes:
    """Sign data with a hex-encoded private key; returns the 64-byte signature."""
    validate_bytes("data", data)
    return signing_key_from_private_key(private_key).sign(bytes(data)).signature


def verify_signature(data: bytes, signature: bytes, public_key: str) -> bool:
    """Verify an Ed25519 signature against a hex-encoded public key."""
    validate_bytes("data", data)
    validate_bytes("signature", signature)
    key = verify_key_from_public_key(public_key)
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        key.verify(bytes(data), bytes(signature))
        return True
    except BadSignatureError:
        return False
