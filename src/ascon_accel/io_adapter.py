"""
Byte-serial I/O adapter.

Contains:
- WordAccumulator: shifts input bytes MSB-first into 64-bit words
  (key, nonce and block buffers)
- OutputQueue: ordered output bytes released one per acknowledge
"""

from __future__ import annotations

from collections import deque

from .permutation import MASK64


class WordAccumulator:
    """
    Fills ``num_words`` 64-bit words from a byte stream, MSB-first.

    Byte 0 lands in bits 63..56 of word 0, byte 8 in bits 63..56 of
    word 1, and so on. Once full, further bytes are refused.
    """

    def __init__(self, num_words: int, name: str = ""):
        if num_words < 1:
            raise ValueError(f"num_words must be >= 1, got {num_words}")
        self.name = name
        self.num_words = num_words
        self._words = [0] * num_words
        self._count = 0

    @property
    def capacity(self) -> int:
        """Capacity in bytes."""
        return self.num_words * 8

    @property
    def count(self) -> int:
        """Bytes accepted so far."""
        return self._count

    @property
    def full(self) -> bool:
        return self._count >= self.capacity

    @property
    def words(self) -> tuple[int, ...]:
        return tuple(self._words)

    def push(self, byte: int) -> bool:
        """
        Shift one byte into the current word.

        Args:
            byte: Value 0..255

        Returns:
            True if accepted, False if the accumulator was already full
        """
        if self.full:
            return False
        index = self._count // 8
        self._words[index] = ((self._words[index] << 8) | (byte & 0xFF)) & MASK64
        self._count += 1
        return True

    def restart(self) -> None:
        """Rewind the byte counter, keeping the word contents."""
        self._count = 0

    def clear(self) -> None:
        """Zero the words and rewind the byte counter."""
        self._words = [0] * self.num_words
        self._count = 0

    def __repr__(self) -> str:
        return f"WordAccumulator(name={self.name!r}, count={self._count}/{self.capacity})"


class OutputQueue:
    """
    Strictly ordered output bytes with dequeue-on-acknowledge.

    The head byte is presented with output-valid until ``acknowledge()``
    retires it; nothing is ever reordered, dropped or repeated.
    """

    def __init__(self):
        self._queue: deque[int] = deque()
        self._released = 0

    def push(self, byte: int) -> None:
        self._queue.append(byte & 0xFF)

    def extend(self, data: bytes) -> None:
        self._queue.extend(data)

    @property
    def valid(self) -> bool:
        return bool(self._queue)

    @property
    def head(self) -> int:
        """Byte currently presented (0 when empty)."""
        return self._queue[0] if self._queue else 0

    def acknowledge(self) -> int | None:
        """
        Retire the head byte.

        Returns:
            The released byte, or None if nothing was pending
        """
        if not self._queue:
            return None
        self._released += 1
        return self._queue.popleft()

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def released(self) -> int:
        """Bytes released since the last clear."""
        return self._released

    def clear(self) -> None:
        self._queue.clear()
        self._released = 0

    def __len__(self) -> int:
        return len(self._queue)
