"""
skyfs Error Taxonomy

Every failure surfaced by the derivation, container and registry layers is
one of the classes below. Nothing is retried or recovered internally; the
caller decides whether to retry (e.g. with a corrected revision) or abort.
"""

from typing import Any


class SkyfsError(Exception):
    """Base class for all skyfs errors."""


class ValidationError(SkyfsError, ValueError):
    """
    Raised at the API boundary when an input has the wrong type, length or
    shape. Raised before any derivation or cryptographic work is done.
    """

    def __init__(self, name: str, value: Any, expected: str, value_kind: str = "parameter"):
        self.name = name
        self.value = value
        self.expected = expected
        self.value_kind = value_kind
        super().__init__(
            f"Expected {value_kind} '{name}' to be {expected}, "
            f"was type '{type(value).__name__}', value '{value}'"
        )


class FormatError(SkyfsError, ValueError):
    """Raised when encoded data is structurally unacceptable (before decryption)."""


class PaddedBlockError(FormatError):
    """Raised when encrypted data is not a valid padded block length."""

    def __init__(self, length: int, nearest: int):
        self.length = length
        self.nearest = nearest
        super().__init__(
            f"Expected parameter 'data' to be padded encrypted data, "
            f"length was '{length}', nearest padded block is '{nearest}'"
        )


class VersionMismatchError(FormatError):
    """Raised when container metadata carries an unsupported version."""

    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            f"Received unrecognized JSON response version '{found}' in metadata, expected '{expected}'"
        )


class DecryptionError(SkyfsError):
    """
    Raised when authenticated decryption fails.

    A corrupted nonce, corrupted ciphertext and a wrong key are
    indistinguishable.
    """

    def __init__(self, message: str = "Could not decrypt given encrypted JSON file"):
        super().__init__(message)


class SignatureVerificationError(SkyfsError):
    """Raised when a registry entry signature does not verify."""

    def __init__(self, message: str = "could not verify signature"):
        super().__init__(message)


class OverflowDetectedError(SkyfsError, OverflowError):
    """Raised when a size, version or revision exceeds its representable range."""


class ContentNotFoundError(SkyfsError):
    """Raised by a blob store that has no content for an identifier."""

    def __init__(self, content_id: str):
        self.content_id = content_id
        super().__init__(f"Content not found: {content_id}")


class RegistryRejectedError(SkyfsError):
    """Raised by a registry collaborator that refuses to store an entry."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Registry rejected entry: {reason}")
