"""
Ascon permutation engine.

The 320-bit state is five 64-bit words x0..x4. One round is:

  pC  constant addition   x2 ^= RC[i]
  pS  substitution layer  5-bit S-box applied bit-sliced across the words
  pL  linear diffusion    xj ^= rotr(xj, a) ^ rotr(xj, b)

Rounds are numbered 0..11; a permutation of r rounds runs rounds
12-r .. 11, so p^6 shares its constants with the tail of p^12.

Every operation is a fixed sequence of XOR/AND/NOT/rotate with no
data-dependent branch.
"""

from typing import Sequence

MASK64 = 0xFFFFFFFFFFFFFFFF
NUM_ROUNDS = 12

ROUND_CONSTANTS = (
    0xF0, 0xE1, 0xD2, 0xC3, 0xB4, 0xA5,
    0x96, 0x87, 0x78, 0x69, 0x5A, 0x4B,
)

# (a, b) right-rotation pair per lane for the diffusion layer
ROTATIONS = (
    (19, 28),
    (61, 39),
    (1, 6),
    (10, 17),
    (7, 41),
)


def rotr64(value: int, shift: int) -> int:
    """Rotate a 64-bit word right by ``shift`` bits."""
    return ((value >> shift) | (value << (64 - shift))) & MASK64


def add_constant(x: list[int], round_index: int) -> None:
    """pC: inject the round constant into x2 (in place)."""
    x[2] ^= ROUND_CONSTANTS[round_index]


def substitution_layer(x: list[int]) -> None:
    """pS: bit-sliced 5-bit S-box over all 64 columns (in place)."""
    x[0] ^= x[4]
    x[4] ^= x[3]
    x[2] ^= x[1]
    t = [(x[j] ^ MASK64) & x[(j + 1) % 5] for j in range(5)]
    for j in range(5):
        x[j] ^= t[(j + 1) % 5]
    x[1] ^= x[0]
    x[0] ^= x[4]
    x[3] ^= x[2]
    x[2] ^= MASK64


def linear_layer(x: list[int]) -> None:
    """pL: per-lane diffusion (in place)."""
    for j, (a, b) in enumerate(ROTATIONS):
        x[j] ^= rotr64(x[j], a) ^ rotr64(x[j], b)


def ascon_round(x: list[int], round_index: int) -> None:
    """Apply round ``round_index`` (0..11) to the state list in place."""
    add_constant(x, round_index)
    substitution_layer(x)
    linear_layer(x)


def permute_rounds(
    state: Sequence[int],
    first_round: int,
    count: int,
) -> tuple[int, ...]:
    """
    Apply a contiguous slice of the round schedule.

    Args:
        state: Five 64-bit words
        first_round: Index of the first round to run (0..11)
        count: Number of rounds to run

    Returns:
        New state as a 5-tuple; the input is not modified

    Raises:
        ValueError: If the state is not 5 words or the slice leaves 0..11
    """
    if len(state) != 5:
        raise ValueError(f"State must be 5 words, got {len(state)}")
    if first_round < 0 or count < 0 or first_round + count > NUM_ROUNDS:
        raise ValueError(
            f"Round slice {first_round}+{count} outside 0..{NUM_ROUNDS - 1}"
        )

    x = [w & MASK64 for w in state]
    for i in range(first_round, first_round + count):
        ascon_round(x, i)
    return tuple(x)


def permute(state: Sequence[int], rounds: int) -> tuple[int, ...]:
    """
    Ascon permutation p^rounds (p^12 for init/finalize, p^6 between blocks).

    Args:
        state: Five 64-bit words
        rounds: Round count, 1..12

    Returns:
        New state as a 5-tuple
    """
    if not 1 <= rounds <= NUM_ROUNDS:
        raise ValueError(f"rounds must be 1..{NUM_ROUNDS}, got {rounds}")
    return permute_rounds(state, NUM_ROUNDS - rounds, rounds)
