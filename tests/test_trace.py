"""Tests for per-step tracing."""

import contextlib
import io
import json

from ascon_accel.config import AcceleratorConfig
from ascon_accel.driver import run_session
from ascon_accel.reference import KNOWN_ANSWER_VECTORS
from ascon_accel.trace import TraceRecorder

VEC = KNOWN_ANSWER_VECTORS[1]


def _traced(verbose: bool = False, trace_state: bool = True):
    buf = io.StringIO()
    out = io.StringIO()
    tracer = TraceRecorder(verbose=verbose, trace_file=buf)
    config = AcceleratorConfig(trace_state=trace_state)
    with contextlib.redirect_stdout(out):
        result = run_session(VEC["key"], VEC["nonce"], VEC["plaintext"],
                             config=config, tracer=tracer)
    return result, tracer, buf.getvalue(), out.getvalue()


class TestTraceRecorder:
    """Structure of recorded traces."""

    def test_output_unchanged_by_tracing(self) -> None:
        result, _, _, _ = _traced(verbose=True)
        assert result.output == VEC["ciphertext"]
        assert result.tag == VEC["tag"]

    def test_one_record_per_step(self) -> None:
        result, tracer, _, _ = _traced()
        records = tracer.get_records()
        steps = [r["step"] for r in records]
        assert steps == sorted(steps)
        assert len(records) == len(set(steps))
        # one reset step + the session itself
        assert len(records) == result.steps_total + 1

    def test_jsonl_well_formed(self) -> None:
        _, tracer, jsonl, _ = _traced()
        lines = jsonl.strip().splitlines()
        assert len(lines) == len(tracer.get_records())
        for line in lines:
            record = json.loads(line)
            assert "step" in record
            assert "phase" in record
            assert len(record["state"]) == 5

    def test_session_events(self) -> None:
        _, tracer, _, _ = _traced()
        assert len(tracer.events("reset")) == 1
        assert len(tracer.events("load_key")) == 16
        assert len(tracer.events("load_nonce")) == 16
        assert any("start_encrypt" in r["event"] for r in tracer.get_records())
        assert any("tag" in r["event"].split(",") for r in tracer.get_records())
        assert "session_end" in tracer.get_records()[-1]["event"]

    def test_events_match_combined_records(self) -> None:
        """A step carrying several events is found under each of them."""
        _, tracer, _, _ = _traced()
        assert len(tracer.events("read_ack")) == 24
        last = tracer.events("session_end")
        assert len(last) == 1
        assert last[0]["event"] == "read_ack,session_end"

    def test_state_omitted_when_disabled(self) -> None:
        _, tracer, _, _ = _traced(trace_state=False)
        assert all("state" not in r for r in tracer.get_records())

    def test_verbose_lines(self) -> None:
        _, tracer, _, stdout = _traced(verbose=True)
        lines = stdout.strip().splitlines()
        assert len(lines) == len(tracer.get_records())
        assert lines[0].startswith("S00001")
        assert any("WAIT_DATA" in line for line in lines)
        assert "STATE:" in lines[-1]

    def test_quiet_by_default(self) -> None:
        _, _, _, stdout = _traced(verbose=False)
        assert stdout == ""

    def test_clear(self) -> None:
        tracer = TraceRecorder()
        tracer.record(step=1, phase="IDLE", event="-")
        tracer.clear()
        assert tracer.get_records() == []
