"""Seed coercion and the single seeded random stream used by a generation pass.

Every stage of a pass draws from the one ``random.Random`` returned by
``make_rng``; nothing in the pipeline touches the module-level ``random``
state, so two passes with the same seed and config make identical draws.
"""
from __future__ import annotations

import hashlib
import random
from typing import Optional, Union

SEED_MAX_INT = 9223372036854775807


def coerce_seed(seed: Optional[Union[int, str]]) -> int:
    """Convert a provided seed (int or str) into a bounded non-negative int.

    ``None`` and blank strings draw a fresh random seed. Digit-only strings
    (optionally signed) are read as integers so ``"42"`` and ``42``, or ``"-5"``
    and ``-5``, produce the same layout; any other string is hashed
    with SHA-256.
    """
    if seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(seed, bool):
        raise TypeError("seed must be int or str, not bool")
    if isinstance(seed, int):
        return seed % SEED_MAX_INT
    if isinstance(seed, str):
        s = seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        digits = s[1:] if s[0] in "+-" else s
        if digits.isdecimal():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX_INT
    raise TypeError(f"seed must be int or str, got {type(seed).__name__}")


def make_rng(seed: int) -> random.Random:
    return random.Random(seed)


def roll_percent(rng: random.Random) -> int:
    """One uniform draw in [0, 100)."""
    return rng.randrange(0, 100)


__all__ = ["coerce_seed", "make_rng", "roll_percent", "SEED_MAX_INT"]
