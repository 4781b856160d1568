"""
AEAD session controller.

Finite state machine sequencing one Ascon-128 (no associated data)
session over the byte-serial interface:

  IDLE -> LOAD_KEY / LOAD_NONCE -> (start) INIT -> WAIT_DATA
       -> PROCESS (8 bytes) -> WAIT_DATA ... -> PROCESS (last) -> FINALIZE
       -> OUTPUT -> IDLE

Step semantics:
- Outputs returned by step() are the values presented during the step,
  i.e. they reflect the registers before the step's update.
- Inputs are decoded combinationally and honored in the same step.
- Reset overrides everything and forces idle outputs in its step.

Permutation latency is set by AcceleratorConfig.rounds_per_step. With the
default (None) a permutation finishes in the step that triggers it and
INIT/FINALIZE are never observed; otherwise the rounds run over the
following steps and data offered meanwhile is ignored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .config import AcceleratorConfig
from .control import IDLE_CONTROL, Command, ControlWord, Mode, StepOutput
from .counters import RoundCounter, StepCounter
from .errors import CapacityError, ProtocolMisuseError
from .io_adapter import OutputQueue, WordAccumulator
from .permutation import NUM_ROUNDS
from .state import CipherState
from .trace import TraceRecorder
from .utils import word_to_bytes

# Ascon-128 parameters: k=128, r=64, a=12, b=6
IV = 0x80400C0600000000
INIT_ROUNDS = 12
BLOCK_ROUNDS = 6
FINAL_ROUNDS = 12
DOMAIN_SEPARATOR = 0x1

TAG_BYTES = 16


class Phase(enum.Enum):
    IDLE = "IDLE"
    LOAD_KEY = "LOAD_KEY"
    LOAD_NONCE = "LOAD_NONCE"
    INIT = "INIT"
    WAIT_DATA = "WAIT_DATA"
    PROCESS = "PROCESS"
    FINALIZE = "FINALIZE"
    OUTPUT = "OUTPUT"


LOAD_PHASES = (Phase.IDLE, Phase.LOAD_KEY, Phase.LOAD_NONCE)
BUSY_PHASES = (
    Phase.INIT,
    Phase.WAIT_DATA,
    Phase.PROCESS,
    Phase.FINALIZE,
    Phase.OUTPUT,
)


@dataclass
class _PermutationJob:
    """A permutation in flight: rounds next_round..11 remain."""

    purpose: str
    next_round: int

    @property
    def remaining(self) -> int:
        return NUM_ROUNDS - self.next_round


class AeadController:
    """
    Ascon-128 accelerator core driven one step at a time.

    Owns the cipher state, key/nonce registers, block buffer and output
    queue; nothing else writes them.
    """

    def __init__(
        self,
        config: AcceleratorConfig | None = None,
        tracer: TraceRecorder | None = None,
    ):
        """
        Initialize the controller in IDLE with all registers cleared.

        Args:
            config: Misuse handling, permutation latency and tracing options
            tracer: Optional trace recorder
        """
        self.config = config or AcceleratorConfig()
        self.tracer = tracer

        self.state = CipherState()
        self.key = WordAccumulator(2, "key")
        self.nonce = WordAccumulator(2, "nonce")
        self.block = WordAccumulator(1, "block")
        self.output = OutputQueue()

        self.step_counter = StepCounter()
        self.round_counter = RoundCounter()
        self.ignored_inputs = 0

        self._phase = Phase.IDLE
        self._decrypt = False
        self._session_key = (0, 0)
        self._blocks = 0
        self._job: _PermutationJob | None = None
        self._events: list[str] = []

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def busy(self) -> bool:
        return self._phase in BUSY_PHASES

    @property
    def blocks_processed(self) -> int:
        """Complete blocks absorbed in the current session."""
        return self._blocks

    @property
    def permutation_pending(self) -> bool:
        return self._job is not None

    @property
    def outputs(self) -> StepOutput:
        """Outputs presented for the current register contents."""
        return StepOutput(
            data=self.output.head,
            busy=self.busy,
            out_valid=self.output.valid,
        )

    def step(
        self,
        data: int = 0,
        control: ControlWord = IDLE_CONTROL,
        reset: bool = False,
    ) -> StepOutput:
        """
        Advance the core by one step.

        Args:
            data: Input data byte (0..255)
            control: Decoded control word for this step
            reset: Reset strobe; overrides all other inputs

        Returns:
            Outputs presented during this step

        Raises:
            ProtocolMisuseError: Out-of-order command (strict mode only)
            CapacityError: 17th key/nonce byte (strict mode only)
        """
        if not reset and not 0 <= data <= 0xFF:
            raise ValueError(f"Data byte must be 0..255, got {data}")

        self.step_counter.increment()
        self._events = []

        if reset:
            self.reset()
            self._events.append("reset")
            out = StepOutput()
            self._trace(data, control, out)
            return out

        if control.mode != Mode.ASCON:
            # Pins belong to the other accelerator; registers hold
            self._events.append("external_mode")
            out = StepOutput()
            self._trace(data, control, out)
            return out

        out = self.outputs

        # Strict checks raise before the head byte is popped
        if self._job is not None:
            self._reject_while_permuting(control)
            self._advance_job()
        else:
            self._dispatch(data, control)

        if control.read_ack and out.out_valid:
            self.output.acknowledge()
            self._events.insert(0, "read_ack")

        if self._phase is Phase.OUTPUT and not self.output.valid:
            self._end_session()

        self._trace(data, control, out)
        return out

    def reset(self) -> None:
        """Return to IDLE, discarding key, nonce, state and queued output."""
        self.state.clear()
        self.key.clear()
        self.nonce.clear()
        self.block.clear()
        self.output.clear()
        self._phase = Phase.IDLE
        self._decrypt = False
        self._session_key = (0, 0)
        self._blocks = 0
        self._job = None

    def reset_counters(self) -> None:
        """Zero step/round accounting (does not touch the registers)."""
        self.step_counter.reset()
        self.round_counter.reset()
        self.ignored_inputs = 0

    # ------------------------------------------------------------------
    # Command handling
    # ------------------------------------------------------------------

    def _dispatch(self, data: int, control: ControlWord) -> None:
        if self._phase in LOAD_PHASES:
            if control.start:
                self._start(control.decrypt)
            elif control.command is Command.LOAD_KEY:
                self._load(self.key, data, Phase.LOAD_KEY)
            elif control.command is Command.LOAD_NONCE:
                self._load(self.nonce, data, Phase.LOAD_NONCE)
            elif control.command is Command.PROCESS:
                self._misuse("process command before start")
            else:
                self._phase = Phase.IDLE
            return

        if control.start:
            self._misuse("start while a session is active")

        if self._phase in (Phase.WAIT_DATA, Phase.PROCESS):
            if control.command is Command.PROCESS:
                self._absorb(data, control.last)
            elif control.command is not Command.NONE:
                self._misuse(f"{control.command.name} during a session")
        elif control.command is not Command.NONE:
            self._misuse(f"{control.command.name} while draining output")

    def _reject_while_permuting(self, control: ControlWord) -> None:
        if control.start:
            self._misuse("start while a session is active")
        if control.command is not Command.NONE:
            self._misuse(f"{control.command.name} while the permutation is running")

    def _misuse(self, detail: str) -> None:
        if self.config.strict:
            raise ProtocolMisuseError(self._phase.name, detail)
        self.ignored_inputs += 1
        self._events.append("ignored")

    def _load(self, register: WordAccumulator, data: int, phase: Phase) -> None:
        # Saturate: the 17th and later bytes never reach the register
        if register.full and self.config.strict:
            raise CapacityError(register.name, register.capacity)
        self._phase = phase
        if register.push(data):
            self._events.append(f"load_{register.name}")
            return
        self.ignored_inputs += 1
        self._events.append("ignored")

    # ------------------------------------------------------------------
    # Session sequencing
    # ------------------------------------------------------------------

    def _start(self, decrypt: bool) -> None:
        if not (self.key.full and self.nonce.full):
            detail = (
                f"start with partial key/nonce "
                f"({self.key.count}/16, {self.nonce.count}/16 bytes)"
            )
            if self.config.strict:
                raise ProtocolMisuseError(self._phase.name, detail)
            self._events.append("start_partial")

        k0, k1 = self.key.words
        n0, n1 = self.nonce.words
        self._session_key = (k0, k1)
        self._decrypt = decrypt
        self._blocks = 0
        self.block.clear()

        self.state.load([IV, k0, k1, n0, n1])
        self._phase = Phase.INIT
        self._events.append("start_decrypt" if decrypt else "start_encrypt")
        self._schedule(INIT_ROUNDS, "init")

    def _absorb(self, data: int, last: bool) -> None:
        """Process one data byte against the rate word."""
        position = self.block.count
        out = self.state.rate_byte(position) ^ data
        # The rate byte tracks the ciphertext in both directions
        ciphertext = data if self._decrypt else out
        self.state.set_rate_byte(position, ciphertext)
        self.block.push(data)
        self.output.push(out)
        self._phase = Phase.PROCESS
        self._events.append("absorb")

        if not self.block.full:
            return

        self._blocks += 1
        self.block.clear()
        if last:
            k0, k1 = self._session_key
            self.state.xor_word(1, k0)
            self.state.xor_word(2, k1)
            self._phase = Phase.FINALIZE
            self._schedule(FINAL_ROUNDS, "finalize")
        else:
            self._schedule(BLOCK_ROUNDS, "inter_block")

    def _schedule(self, rounds: int, purpose: str) -> None:
        self._job = _PermutationJob(purpose, NUM_ROUNDS - rounds)
        if self.config.combinational:
            self._advance_job()

    def _advance_job(self) -> None:
        job = self._job
        if self.config.rounds_per_step is None:
            count = job.remaining
        else:
            count = min(self.config.rounds_per_step, job.remaining)

        self.state.apply_rounds(job.next_round, count)
        job.next_round += count
        self.round_counter.add(count, job.purpose)

        if job.remaining == 0:
            self._job = None
            self.round_counter.complete()
            self._finish_permutation(job.purpose)

    def _finish_permutation(self, purpose: str) -> None:
        k0, k1 = self._session_key
        if purpose == "init":
            self.state.xor_word(3, k0)
            self.state.xor_word(4, k1)
            self.state.xor_word(4, DOMAIN_SEPARATOR)
            self._phase = Phase.WAIT_DATA
            self._events.append("init_done")
        elif purpose == "inter_block":
            self._phase = Phase.WAIT_DATA
            self._events.append("block_done")
        elif purpose == "finalize":
            tag = (
                word_to_bytes(self.state.word(3) ^ k0)
                + word_to_bytes(self.state.word(4) ^ k1)
            )
            self.output.extend(tag)
            self._phase = Phase.OUTPUT
            self._events.append("tag")
        else:
            raise ValueError(f"Unknown permutation purpose: {purpose}")

    def _end_session(self) -> None:
        """Drop back to IDLE once the last output byte is acknowledged."""
        self.state.clear()
        self.key.restart()
        self.nonce.restart()
        self.block.clear()
        self.output.clear()
        self._session_key = (0, 0)
        self._blocks = 0
        self._phase = Phase.IDLE
        self._events.append("session_end")

    # ------------------------------------------------------------------
    # Tracing
    # ------------------------------------------------------------------

    def _trace(self, data: int, control: ControlWord, out: StepOutput) -> None:
        if self.tracer is None:
            return
        fields = {
            "step": self.step_counter.count,
            "phase": self._phase.name,
            "event": ",".join(self._events) or "-",
            "data_in": data,
            "control": control.describe(),
            "data_out": out.data,
            "busy": out.busy,
            "out_valid": out.out_valid,
        }
        if self.config.trace_state:
            fields["state"] = list(self.state.snapshot())
        self.tracer.record(**fields)
