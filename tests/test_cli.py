"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from ascon_accel.cli import main
from ascon_accel.reference import KNOWN_ANSWER_VECTORS

VEC = KNOWN_ANSWER_VECTORS[1]


class TestCli:
    """Commands run end to end through CliRunner."""

    def test_kat_passes(self) -> None:
        result = CliRunner().invoke(main, ["kat"])
        assert result.exit_code == 0, result.output
        assert "KAT PASSED: All 6 sessions correct" in result.output

    def test_kat_round_per_step_json(self, tmp_path) -> None:
        path = tmp_path / "kat.json"
        result = CliRunner().invoke(
            main, ["kat", "--rounds-per-step", "1", "--json", str(path), "--verbose"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text())
        assert data["count"] == 6
        assert all(r["correct"] for r in data["results"])
        assert data["results"][2]["tag_hex"] == VEC["tag"].hex()

    def test_encrypt(self) -> None:
        result = CliRunner().invoke(main, [
            "encrypt",
            "--key", VEC["key"].hex(),
            "--nonce", VEC["nonce"].hex(),
            "--pt", VEC["plaintext"].hex(),
        ])
        assert result.exit_code == 0, result.output
        assert f"Ciphertext: {VEC['ciphertext'].hex()}" in result.output
        assert f"Tag: {VEC['tag'].hex()}" in result.output
        assert "[OK] PASS" in result.output

    def test_encrypt_writes_trace(self, tmp_path) -> None:
        path = tmp_path / "trace.jsonl"
        result = CliRunner().invoke(main, [
            "encrypt",
            "--key", VEC["key"].hex(),
            "--nonce", VEC["nonce"].hex(),
            "--pt", VEC["plaintext"].hex(),
            "--trace", str(path),
        ])
        assert result.exit_code == 0, result.output
        lines = path.read_text().strip().splitlines()
        assert len(lines) == 66
        assert json.loads(lines[0])["event"] == "reset"

    def test_encrypt_verbose_round_summary(self) -> None:
        result = CliRunner().invoke(main, [
            "encrypt",
            "--key", VEC["key"].hex(),
            "--nonce", VEC["nonce"].hex(),
            "--pt", VEC["plaintext"].hex(),
            "--verbose",
        ])
        assert result.exit_code == 0, result.output
        assert "Total rounds: 24 (2 permutations)" in result.output
        assert "  finalize: 12 rounds" in result.output

    def test_decrypt_with_tag(self) -> None:
        result = CliRunner().invoke(main, [
            "decrypt",
            "--key", VEC["key"].hex(),
            "--nonce", VEC["nonce"].hex(),
            "--ct", VEC["ciphertext"].hex(),
            "--tag", VEC["tag"].hex(),
        ])
        assert result.exit_code == 0, result.output
        assert f"Plaintext: {VEC['plaintext'].hex()}" in result.output
        assert "authentic" in result.output

    def test_decrypt_wrong_tag(self) -> None:
        result = CliRunner().invoke(main, [
            "decrypt",
            "--key", VEC["key"].hex(),
            "--nonce", VEC["nonce"].hex(),
            "--ct", VEC["ciphertext"].hex(),
            "--tag", "00" * 16,
        ])
        assert result.exit_code == 1

    def test_bad_key_length(self) -> None:
        result = CliRunner().invoke(main, [
            "encrypt", "--key", "0011", "--nonce", "00" * 16, "--pt", "00" * 8,
        ])
        assert result.exit_code == 2
        assert "Key must be 32 hex chars" in result.output

    def test_partial_block_rejected(self) -> None:
        result = CliRunner().invoke(main, [
            "encrypt", "--key", "00" * 16, "--nonce", "00" * 16, "--pt", "00" * 5,
        ])
        assert result.exit_code == 2

    def test_selftest_seeded(self) -> None:
        result = CliRunner().invoke(main, ["selftest", "--n", "4", "--seed", "7"])
        assert result.exit_code == 0, result.output
        assert "Round trips: 4/4 passed" in result.output
