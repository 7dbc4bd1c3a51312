"""
skyfs Size Padding Scheme

Every encrypted container is rounded up to one of a fixed, public set of
sizes so that its length leaks only a coarse bound on the plaintext size.

Tier n (n = 0, 1, 2, ...) covers sizes up to 2^n * 80 KiB and pads them to a
multiple of 2^n * 4 KiB. Granularity therefore doubles each time the size
doubles, keeping the padding overhead at or below 10% above the first tier:

    5 KiB   -> 8 KiB      (tier 0, 4 KiB blocks)
    105 KiB -> 112 KiB    (tier 1, 8 KiB blocks)
    351 KiB -> 352 KiB    (tier 3, 32 KiB blocks)
    100 MiB -> 104 MiB    (tier 11, 8 MiB blocks)

The table is an interoperability contract; do not change it.
"""

from typing import Iterator, Tuple

from .errors import OverflowDetectedError
from .validation import throw_validation_error, validate_integer

KIB = 1 << 10

MIN_PADDED_SIZE = 4 * KIB

# Largest size the reference implementation represents exactly.
MAX_SAFE_FILE_SIZE = (1 << 53) - 1


def _tiers() -> Iterator[Tuple[int, int]]:
    """Yield (upper bound, block size) for every representable tier."""
    n = 0
    while True:
        bound = (1 << n) * 80 * KIB
        if bound > MAX_SAFE_FILE_SIZE:
            return
        yield bound, (1 << n) * 4 * KIB
        n += 1


def _validate_size(name: str, size: int) -> None:
    validate_integer(name, size)
    if size < 0:
        throw_validation_error(name, size, "a non-negative integer")


def pad_file_size(initial_size: int) -> int:
    """
    Round a size up to the nearest padded block.

    Raises:
        OverflowDetectedError: If the size is beyond the last tier
    """
    _validate_size("initial_size", initial_size)

    for bound, block in _tiers():
        if initial_size <= bound:
            if initial_size == 0:
                return MIN_PADDED_SIZE
            remainder = initial_size % block
            if remainder == 0:
                return initial_size
            return initial_size - remainder + block

    raise OverflowDetectedError("Could not pad file size, overflow detected.")


def check_padded_block(size: int) -> bool:
    """
    Check whether a size is already a member of the padded-size set.

    Raises:
        OverflowDetectedError: If the size is beyond the last tier
    """
    _validate_size("size", size)

    for bound, block in _tiers():
        if size <= bound:
            return size != 0 and size % block == 0

    raise OverflowDetectedError("Could not check padded file size, overflow detected.")
