"""Command-line interface for the Ascon accelerator model."""

from __future__ import annotations

import random
import sys
from typing import Callable, TextIO

import click
from Crypto.Random import get_random_bytes

from . import __version__
from .config import AcceleratorConfig
from .controller import AeadController
from .driver import SessionDriver
from .errors import AsconAccelError
from .reference import KNOWN_ANSWER_VECTORS, ascon_decrypt, ascon_encrypt, verify_tag
from .reporting import export_to_json, format_results_table
from .results import SessionResult
from .trace import TraceRecorder, print_header, print_result
from .utils import bytes_to_hex, hex_to_bytes


def _parse_hex(label: str, value: str, length: int | None = None, block: bool = False) -> bytes:
    try:
        data = hex_to_bytes(value)
    except ValueError as e:
        raise click.BadParameter(f"Invalid {label} hex: {e}")
    if length is not None and len(data) != length:
        raise click.BadParameter(
            f"{label} must be {length * 2} hex chars ({length} bytes), got {len(value)} chars"
        )
    if block and (not data or len(data) % 8):
        raise click.BadParameter(f"{label} must be a non-empty multiple of 8 bytes")
    return data


def _session_options(func: Callable) -> Callable:
    """Options shared by 'encrypt' and 'decrypt'."""
    options = [
        click.option("--key", required=True, help="128-bit key as 32 hex chars"),
        click.option("--nonce", required=True, help="128-bit nonce as 32 hex chars"),
        click.option(
            "--rounds-per-step",
            type=click.IntRange(1, 12),
            default=None,
            help="Permutation rounds per step (default: whole permutation per step)",
        ),
        click.option("--strict", is_flag=True, help="Reject protocol misuse instead of ignoring it"),
        click.option("--verbose", "-v", is_flag=True, help="Print a per-step trace"),
        click.option("--trace", "trace_path", type=click.Path(), default=None,
                     help="Write a JSON Lines trace to FILE"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run_and_report(
    key: bytes,
    nonce: bytes,
    data: bytes,
    decrypt: bool,
    rounds_per_step: int | None,
    strict: bool,
    verbose: bool,
    trace_path: str | None,
) -> SessionResult:
    trace_file: TextIO | None = None
    if trace_path:
        try:
            trace_file = open(trace_path, "w")
        except OSError as e:
            click.echo(f"Error: Cannot open trace file: {e}", err=True)
            sys.exit(1)

    config = AcceleratorConfig(strict=strict, rounds_per_step=rounds_per_step)
    tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
    driver = SessionDriver(AeadController(config=config, tracer=tracer))

    try:
        result = driver.run(key, nonce, data, decrypt=decrypt)
    except AsconAccelError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        if trace_file:
            trace_file.close()

    print_result(
        "Plaintext" if decrypt else "Ciphertext",
        bytes_to_hex(result.output),
        bytes_to_hex(result.tag),
        result.steps_total,
        result.rounds_total,
        result.correct,
    )
    if verbose:
        click.echo(driver.controller.round_counter.summary())
    if not result.correct:
        click.echo(result.error_detail, err=True)
    return result


@click.group()
@click.version_option(version=__version__, prog_name="ascon-accel")
def main() -> None:
    """Ascon-128 byte-serial accelerator model.

    Drives the cycle-level controller through complete sessions and
    checks every result against the batch reference.
    """
    pass


@main.command()
@_session_options
@click.option("--pt", "pt_hex", required=True, help="Plaintext hex, whole 8-byte blocks")
def encrypt(
    key: str,
    nonce: str,
    pt_hex: str,
    rounds_per_step: int | None,
    strict: bool,
    verbose: bool,
    trace_path: str | None,
) -> None:
    """Encrypt plaintext blocks through the serial core."""
    key_b = _parse_hex("Key", key, 16)
    nonce_b = _parse_hex("Nonce", nonce, 16)
    plaintext = _parse_hex("Plaintext", pt_hex, block=True)

    print_header("Ascon-128 serial encryption")
    click.echo(f"Key:       {bytes_to_hex(key_b)}")
    click.echo(f"Nonce:     {bytes_to_hex(nonce_b)}")
    click.echo(f"Plaintext: {bytes_to_hex(plaintext)}")

    result = _run_and_report(
        key_b, nonce_b, plaintext, False, rounds_per_step, strict, verbose, trace_path
    )
    sys.exit(0 if result.correct else 1)


@main.command()
@_session_options
@click.option("--ct", "ct_hex", required=True, help="Ciphertext hex, whole 8-byte blocks")
@click.option("--tag", "tag_hex", default=None, help="Expected tag (32 hex chars) to verify")
def decrypt(
    key: str,
    nonce: str,
    ct_hex: str,
    tag_hex: str | None,
    rounds_per_step: int | None,
    strict: bool,
    verbose: bool,
    trace_path: str | None,
) -> None:
    """Decrypt ciphertext blocks and optionally verify the tag."""
    key_b = _parse_hex("Key", key, 16)
    nonce_b = _parse_hex("Nonce", nonce, 16)
    ciphertext = _parse_hex("Ciphertext", ct_hex, block=True)
    expected_tag = _parse_hex("Tag", tag_hex, 16) if tag_hex else None

    print_header("Ascon-128 serial decryption")
    click.echo(f"Key:        {bytes_to_hex(key_b)}")
    click.echo(f"Nonce:      {bytes_to_hex(nonce_b)}")
    click.echo(f"Ciphertext: {bytes_to_hex(ciphertext)}")

    result = _run_and_report(
        key_b, nonce_b, ciphertext, True, rounds_per_step, strict, verbose, trace_path
    )
    if not result.correct:
        sys.exit(1)
    if expected_tag is not None:
        if verify_tag(result.tag, expected_tag):
            click.echo("Tag: [OK] authentic")
        else:
            click.echo("Tag: [ERROR] mismatch, plaintext must be discarded", err=True)
            sys.exit(1)
    sys.exit(0)


@main.command()
@click.option(
    "--rounds-per-step",
    type=click.IntRange(1, 12),
    default=None,
    help="Permutation rounds per step (default: whole permutation per step)",
)
@click.option("--json", "json_path", type=click.Path(), default=None,
              help="Also export results to a JSON file")
@click.option("--verbose", "-v", is_flag=True, help="Show output and tag columns")
def kat(rounds_per_step: int | None, json_path: str | None, verbose: bool) -> None:
    """Run the known-answer vectors in both directions."""
    config = AcceleratorConfig(rounds_per_step=rounds_per_step)
    rows: list[tuple[str, SessionResult]] = []
    failures = 0

    for vec in KNOWN_ANSWER_VECTORS:
        driver = SessionDriver(AeadController(config=config))

        enc = driver.run(vec["key"], vec["nonce"], vec["plaintext"])
        if enc.output != vec["ciphertext"] or enc.tag != vec["tag"]:
            enc.correct = False
            enc.error_detail = "Known-answer mismatch"
        rows.append((vec["name"], enc))

        dec = driver.run(vec["key"], vec["nonce"], vec["ciphertext"], decrypt=True)
        if dec.output != vec["plaintext"] or dec.tag != vec["tag"]:
            dec.correct = False
            dec.error_detail = "Known-answer mismatch"
        rows.append((vec["name"], dec))

        failures += sum(1 for r in (enc, dec) if not r.correct)

    click.echo(format_results_table(rows, compact=not verbose))

    if json_path:
        path = export_to_json(rows, json_path)
        click.echo(f"\nJSON: {path}")

    click.echo("")
    if failures:
        click.echo(f"KAT FAILED: {failures}/{len(rows)} sessions wrong")
        sys.exit(1)
    click.echo(f"KAT PASSED: All {len(rows)} sessions correct")


@main.command()
@click.option("--n", "num_tests", type=int, default=50,
              help="Number of random sessions (default: 50)")
@click.option("--max-blocks", type=click.IntRange(1, 64), default=4,
              help="Maximum blocks per session (default: 4)")
@click.option(
    "--rounds-per-step",
    type=click.IntRange(1, 12),
    default=None,
    help="Permutation rounds per step (default: whole permutation per step)",
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--verbose", "-v", is_flag=True, help="Show every failure")
def selftest(
    num_tests: int,
    max_blocks: int,
    rounds_per_step: int | None,
    seed: int | None,
    verbose: bool,
) -> None:
    """Random encrypt/decrypt round trips against the reference."""
    if seed is not None:
        rng = random.Random(seed)
        random_bytes = rng.randbytes
        randint = rng.randint
    else:
        random_bytes = get_random_bytes
        randint = random.randint

    config = AcceleratorConfig(rounds_per_step=rounds_per_step)
    driver = SessionDriver(AeadController(config=config))

    click.echo(f"Running {num_tests} random sessions (max {max_blocks} blocks)...")
    passed = 0
    for i in range(num_tests):
        key = random_bytes(16)
        nonce = random_bytes(16)
        plaintext = random_bytes(8 * randint(1, max_blocks))

        enc = driver.run(key, nonce, plaintext)
        dec = driver.run(key, nonce, enc.output, decrypt=True)
        ref_ct, ref_tag = ascon_encrypt(key, nonce, plaintext)
        ref_pt, _ = ascon_decrypt(key, nonce, ref_ct)

        ok = (
            enc.correct and dec.correct
            and enc.output == ref_ct and dec.output == ref_pt == plaintext
            and verify_tag(enc.tag, ref_tag) and verify_tag(dec.tag, ref_tag)
        )
        if ok:
            passed += 1
        elif verbose:
            click.echo(f"  Session {i+1}: FAIL - {enc.error_detail or dec.error_detail}")

    click.echo(f"Round trips: {passed}/{num_tests} passed")
    if passed != num_tests:
        click.echo(f"SELFTEST FAILED: {num_tests - passed} failures")
        sys.exit(1)
    click.echo("SELFTEST PASSED")


if __name__ == "__main__":
    main()
