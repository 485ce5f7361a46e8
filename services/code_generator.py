"""Short-code allocation with a bounded uniqueness retry."""

from __future__ import annotations

import random
from typing import Awaitable, Callable, Optional

from errors import CodeSpaceExhaustedError
from shared.generators import ALPHABET, DEFAULT_CODE_LENGTH, generate_short_code
from shared.logging import get_logger

log = get_logger(__name__)

IsTaken = Callable[[str], Awaitable[bool]]

DEFAULT_MAX_ATTEMPTS = 10


class CodeGenerator:
    """Draws random codes until one is free, giving up after ``max_attempts``.

    The existence check is a point query with no lock held; two concurrent
    callers can still pick the same free code, so the insert itself must be
    guarded by the store's unique index.
    """

    def __init__(
        self,
        length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        alphabet: str = ALPHABET,
        rng: Optional[random.Random] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.length = length
        self.max_attempts = max_attempts
        self.alphabet = alphabet
        self._rng = rng

    def generate(self) -> str:
        return generate_short_code(self.length, self.alphabet, self._rng)

    async def generate_unique(self, is_taken: IsTaken) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = self.generate()
            if not await is_taken(code):
                if attempt > 1:
                    log.info("short_code_collisions", attempts=attempt)
                return code

        log.error(
            "code_space_exhausted",
            attempts=self.max_attempts,
            length=self.length,
        )
        raise CodeSpaceExhaustedError(
            "Could not allocate a free short code; choose a custom code or a longer length",
            details={"attempts": self.max_attempts, "length": self.length},
        )
