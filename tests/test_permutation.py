"""Tests for the Ascon permutation engine."""

import pytest

from ascon_accel.permutation import (
    MASK64,
    ROUND_CONSTANTS,
    ROTATIONS,
    permute,
    permute_rounds,
    rotr64,
)

IV = 0x80400C0600000000
SAMPLE_STATE = [
    0x0123456789ABCDEF,
    0xFEDCBA9876543210,
    0x0F1E2D3C4B5A6978,
    0x8796A5B4C3D2E1F0,
    0x1111111111111111,
]


class TestConstants:
    """Tests for the fixed round parameters."""

    def test_twelve_round_constants(self) -> None:
        """There is one 8-bit constant per round."""
        assert len(ROUND_CONSTANTS) == 12
        assert ROUND_CONSTANTS[0] == 0xF0
        assert ROUND_CONSTANTS[6] == 0x96
        assert ROUND_CONSTANTS[11] == 0x4B
        assert all(0 <= c <= 0xFF for c in ROUND_CONSTANTS)

    def test_rotation_pairs(self) -> None:
        """Diffusion rotation amounts per lane."""
        assert ROTATIONS == ((19, 28), (61, 39), (1, 6), (10, 17), (7, 41))


class TestRotr64:
    """Tests for 64-bit right rotation."""

    def test_rotate_lsb_wraps_to_msb(self) -> None:
        assert rotr64(1, 1) == 1 << 63

    def test_rotate_by_eight(self) -> None:
        assert rotr64(0x0123456789ABCDEF, 8) == 0xEF0123456789ABCD

    def test_result_stays_64_bit(self) -> None:
        assert rotr64(MASK64, 13) == MASK64


class TestPermute:
    """Tests for permute() and permute_rounds()."""

    def test_init_permutation_known_answer(self) -> None:
        """p^12 of the all-zero key/nonce state gives the known rate word."""
        x = permute([IV, 0, 0, 0, 0], 12)
        # Rate word is the ciphertext of an all-zero first block
        assert x[0] == 0xB8DFF46B0DB421F8

    def test_twelve_rounds_split_into_two_halves(self) -> None:
        """p^12 equals rounds 0-5 followed by rounds 6-11."""
        full = permute(SAMPLE_STATE, 12)
        first = permute_rounds(SAMPLE_STATE, 0, 6)
        assert permute_rounds(first, 6, 6) == full

    def test_six_rounds_use_tail_constants(self) -> None:
        """p^6 runs rounds 6..11."""
        assert permute(SAMPLE_STATE, 6) == permute_rounds(SAMPLE_STATE, 6, 6)

    def test_round_by_round_matches_full(self) -> None:
        """Stepping one round at a time reaches the same state."""
        x = tuple(SAMPLE_STATE)
        for i in range(12):
            x = permute_rounds(x, i, 1)
        assert x == permute(SAMPLE_STATE, 12)

    def test_input_not_modified(self) -> None:
        """permute() is pure."""
        state = list(SAMPLE_STATE)
        permute(state, 12)
        assert state == SAMPLE_STATE

    def test_deterministic(self) -> None:
        assert permute(SAMPLE_STATE, 6) == permute(SAMPLE_STATE, 6)

    def test_words_stay_64_bit(self) -> None:
        for word in permute([MASK64] * 5, 12):
            assert 0 <= word <= MASK64

    def test_zero_state_not_fixed_point(self) -> None:
        assert permute([0] * 5, 12) != (0, 0, 0, 0, 0)

    def test_zero_rounds_is_identity(self) -> None:
        assert permute_rounds(SAMPLE_STATE, 12, 0) == tuple(SAMPLE_STATE)

    @pytest.mark.parametrize("rounds", [0, 13, -1])
    def test_invalid_round_count(self, rounds: int) -> None:
        with pytest.raises(ValueError, match="rounds must be"):
            permute(SAMPLE_STATE, rounds)

    def test_slice_past_last_round(self) -> None:
        with pytest.raises(ValueError, match="Round slice"):
            permute_rounds(SAMPLE_STATE, 10, 3)

    def test_wrong_state_size(self) -> None:
        with pytest.raises(ValueError, match="State must be 5 words"):
            permute([0] * 4, 12)
