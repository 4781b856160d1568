"""
Trace recording and pretty printing for accelerator sessions.

Contains:
- TraceRecorder: JSON Lines trace + compact per-step verbose output
- print_header / print_result: shared formatting helpers
"""

import json
from typing import Any, TextIO

from .utils import format_state_line


class TraceRecorder:
    """
    Records and outputs per-step traces of the controller.

    Supports:
    - JSON Lines file output  (when trace_file is set)
    - Compact verbose stdout  (when verbose is set)
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """
        Record a trace entry.

        Typical keys: step, phase, event, data_in, control, data_out,
        busy, out_valid, state.
        """
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = self._make_serializable(record)
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, bytes):
            return obj.hex()
        else:
            return obj

    def _print_verbose(self, record: dict[str, Any]) -> None:
        """One line per record: step, phase, event, bus values, state."""
        step = record.get("step", 0)
        phase = record.get("phase", "?")
        event = record.get("event", "")

        line = f"S{step:05d} {phase:10s} {event:14s}"
        if "data_in" in record:
            line += f" IN:{record['data_in']:02x}"
        if "data_out" in record:
            line += f" OUT:{record['data_out']:02x}"
        if "busy" in record:
            line += f" B{int(record['busy'])}V{int(record.get('out_valid', False))}"
        if "state" in record:
            line += f"  STATE:{format_state_line(record['state'])}"
        print(line)

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def events(self, name: str) -> list[dict[str, Any]]:
        """Records whose ``event`` list includes ``name``."""
        return [r for r in self._records if name in r.get("event", "").split(",")]

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_result(label: str, output_hex: str, tag_hex: str, steps: int,
                 rounds: int | None = None,
                 passed: bool = True) -> None:
    """Print final session result."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"{label}: {output_hex}")
    print(f"Tag: {tag_hex}")
    print(f"Steps: {steps}")

    if rounds is not None:
        print(f"Permutation rounds: {rounds}")

    status = "PASS" if passed else "FAIL"
    marker = "[OK]" if passed else "[ERROR]"
    print(f"Verification: {marker} {status}")
    print(f"{'='*70}")
