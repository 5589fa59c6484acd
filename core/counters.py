from __future__ import annotations
from typing import Optional

from core.errors import PreconditionViolation

MODULUS_32 = 2 ** 32
MODULUS_64 = 2 ** 64


def subtract_with_wrap(current: int, previous: int, modulus: int) -> int:
    """
    Difference of two readings of a fixed-width counter.

    A single wrap between the readings is recovered; several wraps within one
    interval are not.

    Args:
        current: Newer counter value
        previous: Older counter value
        modulus: 2**32 or 2**64

    Returns:
        (modulus + current - previous) mod modulus
    """
    return (modulus + current - previous) % modulus


class CounterWidthPolicy:
    """
    Bit width of the host's hardware counters.

    Starts undetermined; baseline() sets it from the CPU op-mode and may set
    it again on a later baseline().
    """

    def __init__(self) -> None:
        self._modulus: Optional[int] = None

    def set_width(self, is_64_bit: bool) -> None:
        self._modulus = MODULUS_64 if is_64_bit else MODULUS_32

    @property
    def is_determined(self) -> bool:
        return self._modulus is not None

    @property
    def bits(self) -> int:
        return 64 if self.current_modulus() == MODULUS_64 else 32

    def current_modulus(self) -> int:
        if self._modulus is None:
            raise PreconditionViolation("counter width has not been established")
        return self._modulus

    def subtract(self, current: int, previous: int) -> int:
        """Wraparound-safe subtraction using the active width."""
        return subtract_with_wrap(current, previous, self.current_modulus())
