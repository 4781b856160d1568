"""
Cipher state register set.

Five 64-bit words. Word 0 is the rate (the only word that ever meets
the data bus); words 1..4 are the capacity.
"""

from __future__ import annotations

from .permutation import MASK64, permute_rounds

STATE_WORDS = 5
RATE_BYTES = 8


class CipherState:
    """
    The x0..x4 register set.

    Mutated only through permutation slices and explicit XOR injections;
    the controller is its single owner.
    """

    def __init__(self, words: tuple[int, ...] | list[int] | None = None):
        self._x: list[int] = [0] * STATE_WORDS
        if words is not None:
            self.load(words)

    def load(self, words: tuple[int, ...] | list[int]) -> None:
        """Overwrite all five words (session initialization)."""
        if len(words) != STATE_WORDS:
            raise ValueError(f"State must be {STATE_WORDS} words, got {len(words)}")
        self._x = [w & MASK64 for w in words]

    def clear(self) -> None:
        self._x = [0] * STATE_WORDS

    def xor_word(self, index: int, value: int) -> None:
        """Inject ``value`` into word ``index`` by XOR."""
        self._x[index] ^= value & MASK64

    def apply_rounds(self, first_round: int, count: int) -> None:
        """Run rounds ``first_round`` .. ``first_round + count - 1``."""
        self._x = list(permute_rounds(self._x, first_round, count))

    def rate_byte(self, position: int) -> int:
        """Byte ``position`` (0 = MSB) of the rate word."""
        shift = 56 - 8 * position
        return (self._x[0] >> shift) & 0xFF

    def set_rate_byte(self, position: int, value: int) -> None:
        """Overwrite byte ``position`` (0 = MSB) of the rate word."""
        shift = 56 - 8 * position
        self._x[0] = (self._x[0] & ~(0xFF << shift) & MASK64) | ((value & 0xFF) << shift)

    def word(self, index: int) -> int:
        return self._x[index]

    def snapshot(self) -> tuple[int, ...]:
        """Immutable copy of the five words."""
        return tuple(self._x)

    def __repr__(self) -> str:
        return "CipherState(" + ", ".join(f"{w:#018x}" for w in self._x) + ")"
