"""
Deterministic RNG utilities for the tank simulation.

All randomness flows through an explicit 32-bit seed: every draw takes a seed
and returns the value together with the next seed. There is no module-level
generator state. The mix is Mulberry32, reproduced bit-exactly with Python
integers masked to 32 bits so that seed chains match other implementations.
"""

import hashlib
import numpy as np
from typing import Any, Tuple

MASK_32 = 0xFFFFFFFF
MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply (low 32 bits of the product)"""
    return (a * b) & MASK_32


def next_random(seed: int) -> Tuple[float, int]:
    """
    Draw a uniform value in [0, 1) and advance the seed.

    Args:
        seed: Current 32-bit seed (wrapped into range if outside it)

    Returns:
        Tuple of (value, next_seed)

    Example:
        value, seed = next_random(seed)
    """
    state = (int(seed) + MULBERRY_INCREMENT) & MASK_32

    value = _imul(state ^ (state >> 15), state | 1)
    value ^= (value + _imul(value ^ (value >> 7), value | 61)) & MASK_32

    normalized = (value ^ (value >> 14)) / TWO_POW_32
    return normalized, state


def next_range(seed: int, min_val: float, max_val: float) -> Tuple[float, int]:
    """Draw a uniform value in [min_val, max_val) and advance the seed"""
    normalized, state = next_random(seed)
    return min_val + (max_val - min_val) * normalized, state


def next_int(seed: int, min_inclusive: int, max_exclusive: int) -> Tuple[int, int]:
    """
    Draw an integer in [min_inclusive, max_exclusive) and advance the seed.

    A degenerate range (max <= min) always yields min_inclusive.
    """
    normalized, state = next_random(seed)
    span = max(1, max_exclusive - min_inclusive)
    return min_inclusive + int(np.floor(normalized * span)), state


def draw_sequence(seed: int, count: int) -> Tuple[np.ndarray, int]:
    """
    Draw `count` consecutive values from the seed chain.

    Args:
        seed: Starting seed
        count: Number of draws

    Returns:
        Tuple of (float64 array of draws, seed after the last draw)
    """
    values = np.empty(count, dtype=np.float64)
    state = int(seed) & MASK_32
    for i in range(count):
        values[i], state = next_random(state)
    return values, state


def make_seed(*components: Any) -> int:
    """
    Derive a stable 32-bit seed from hierarchical components.

    Uses SHA256 so that labels like ("showcase", "community-tank") map to
    the same seed across sessions and platforms.

    Example:
        seed = make_seed("scenario", "hostile-pair", 3)
    """
    hash_input = ":".join(str(c) for c in components)
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    return int.from_bytes(hash_bytes[:4], byteorder='big')
