"""
Random short-code generation. Pure functions without side effects.

Codes are drawn from a cryptographically secure source: short codes are the
primary lookup key, so a biased or predictable generator makes them guessable.
The random source is injectable so callers (and tests) never depend on a
process-wide generator.
"""

from __future__ import annotations

import random
import secrets
import string
from typing import Optional

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

DEFAULT_CODE_LENGTH = 7

_system_random = secrets.SystemRandom()


def generate_short_code(
    length: int = DEFAULT_CODE_LENGTH,
    alphabet: str = ALPHABET,
    rng: Optional[random.Random] = None,
) -> str:
    """Generate a short code of *length* characters drawn uniformly from *alphabet*.

    Args:
        length: Number of characters (default 7).
        alphabet: Symbols to draw from (default: the 62 alphanumerics).
        rng: Random source; defaults to ``secrets.SystemRandom``.

    Returns:
        Random string of the requested length.

    Raises:
        ValueError: If *length* is not positive or *alphabet* is empty.
    """
    if length <= 0:
        raise ValueError("length must be positive")
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    source = rng or _system_random
    return "".join(source.choice(alphabet) for _ in range(length))
