"""
Utility functions for byte/word conversions and hex formatting.

Words are 64-bit unsigned integers; every conversion is big-endian
(MSB-first), matching the order bytes cross the serial interface:

  byte[0] -> bits 63..56 of the word
  byte[7] -> bits  7..0
"""

from Crypto.Util.number import bytes_to_long


def bytes_to_word(data: bytes) -> int:
    """
    Convert 8 bytes (MSB-first) to a 64-bit word.
    """
    if len(data) != 8:
        raise ValueError(f"Expected 8 bytes, got {len(data)}")
    return bytes_to_long(data)


def word_to_bytes(word: int, width: int = 8) -> bytes:
    """
    Convert an unsigned word to ``width`` big-endian bytes.
    """
    return word.to_bytes(width, "big")


def bytes_to_words(data: bytes) -> list[int]:
    """
    Split data into 64-bit words.

    Args:
        data: bytes, length a multiple of 8

    Returns:
        List of words in order
    """
    if len(data) % 8:
        raise ValueError(f"Length must be a multiple of 8 bytes, got {len(data)}")
    return [bytes_to_word(data[i:i + 8]) for i in range(0, len(data), 8)]


def words_to_bytes(words: list[int]) -> bytes:
    """
    Concatenate 64-bit words into bytes.
    """
    return b"".join(word_to_bytes(w) for w in words)


def split_halves(data: bytes) -> tuple[int, int]:
    """
    Split a 16-byte key or nonce into its (high, low) 64-bit halves.
    """
    if len(data) != 16:
        raise ValueError(f"Expected 16 bytes, got {len(data)}")
    return bytes_to_word(data[:8]), bytes_to_word(data[8:])


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes (whitespace tolerated).
    """
    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hex string.
    """
    return data.hex()


def format_word(word: int) -> str:
    return f"{word:016x}"


def format_state_line(state: tuple[int, ...] | list[int]) -> str:
    """
    Format state as five space-separated 64-bit words.
    """
    return " ".join(format_word(w) for w in state)

