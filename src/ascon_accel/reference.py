"""Batch reference Ascon-128 (no associated data) for verification.

Computes the same bytes as the serial core in one call, word at a time,
so every cycle-level session can be checked against it.
"""

from __future__ import annotations

import hmac

from .controller import (
    BLOCK_ROUNDS,
    DOMAIN_SEPARATOR,
    FINAL_ROUNDS,
    INIT_ROUNDS,
    IV,
)
from .permutation import permute
from .utils import bytes_to_words, split_halves, word_to_bytes, words_to_bytes


def _check_sizes(key: bytes, nonce: bytes, data: bytes) -> None:
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    if len(nonce) != 16:
        raise ValueError(f"Nonce must be 16 bytes, got {len(nonce)}")
    if len(data) % 8:
        raise ValueError(f"Data must be a multiple of 8 bytes, got {len(data)}")


def _process(key: bytes, nonce: bytes, data: bytes, decrypt: bool) -> tuple[bytes, bytes]:
    _check_sizes(key, nonce, data)
    k0, k1 = split_halves(key)
    n0, n1 = split_halves(nonce)

    x = list(permute([IV, k0, k1, n0, n1], INIT_ROUNDS))
    x[3] ^= k0
    x[4] ^= k1
    x[4] ^= DOMAIN_SEPARATOR

    blocks = bytes_to_words(data)
    out = []
    for i, block in enumerate(blocks):
        out.append(x[0] ^ block)
        x[0] = block if decrypt else out[-1]
        if i < len(blocks) - 1:
            x = list(permute(x, BLOCK_ROUNDS))

    x[1] ^= k0
    x[2] ^= k1
    x = list(permute(x, FINAL_ROUNDS))
    tag = word_to_bytes(x[3] ^ k0) + word_to_bytes(x[4] ^ k1)
    return words_to_bytes(out), tag


def ascon_encrypt(key: bytes, nonce: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
    """Encrypt whole 8-byte blocks.

    Args:
        key: 16-byte key
        nonce: 16-byte nonce
        plaintext: Multiple of 8 bytes (may be empty)

    Returns:
        Tuple of (ciphertext, 16-byte tag)

    Raises:
        ValueError: On wrong key/nonce size or a partial block
    """
    return _process(key, nonce, plaintext, decrypt=False)


def ascon_decrypt(key: bytes, nonce: bytes, ciphertext: bytes) -> tuple[bytes, bytes]:
    """Decrypt whole 8-byte blocks.

    The computed tag is returned, not checked; use verify_tag() to
    compare it with the expected one.

    Returns:
        Tuple of (plaintext, 16-byte computed tag)
    """
    return _process(key, nonce, ciphertext, decrypt=True)


def verify_tag(computed: bytes, expected: bytes) -> bool:
    """Constant-time tag comparison."""
    return hmac.compare_digest(computed, expected)


def validate_against_reference(
    key: bytes,
    nonce: bytes,
    data: bytes,
    candidate_output: bytes,
    candidate_tag: bytes,
    decrypt: bool = False,
) -> tuple[bool, str]:
    """Validate a session's output bytes and tag against the reference.

    Returns:
        Tuple of (is_correct, error_detail)
    """
    expected_out, expected_tag = _process(key, nonce, data, decrypt)
    if candidate_output != expected_out:
        return False, (
            f"Output mismatch: expected {expected_out.hex()}, "
            f"got {candidate_output.hex()}"
        )
    if candidate_tag != expected_tag:
        return False, (
            f"Tag mismatch: expected {expected_tag.hex()}, "
            f"got {candidate_tag.hex()}"
        )
    return True, ""


# Known-answer vectors
KNOWN_ANSWER_VECTORS = [
    {
        "name": "zeros",
        "key": bytes(16),
        "nonce": bytes(16),
        "plaintext": bytes(8),
        "ciphertext": bytes.fromhex("b8dff46b0db421f8"),
        "tag": bytes.fromhex("eaf0f7b7a32b807e91ee437183d14b71"),
    },
    {
        "name": "counting",
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "nonce": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "plaintext": bytes.fromhex("0011223344556677"),
        "ciphertext": bytes.fromhex("1b0276e833b5bdc3"),
        "tag": bytes.fromhex("7964b9cac01116190a4ad52d9023ed19"),
    },
    {
        "name": "two_blocks",
        "key": bytes([0x01] * 16),
        "nonce": bytes([0x02] * 16),
        "plaintext": bytes([0xAA] * 8 + [0xBB] * 8),
        "ciphertext": bytes.fromhex("32f5bb4d8a0a8b3f119efc192586e30b"),
        "tag": bytes.fromhex("0a06465ef67f0a4e184ca4d2ad45ddc5"),
    },
]
