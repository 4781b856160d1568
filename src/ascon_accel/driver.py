"""
Session driver: runs the serial protocol against an AeadController.

Plays the role of the external caller on the byte-serial interface:

  1. load_key   16 steps, one byte per step
  2. load_nonce 16 steps
  3. start      1 step (+ permutation latency)
  4. process    8 steps per block, last flag on the final byte
  5. drain      read_ack held; one byte per step that presents out_valid

The core has no timeouts, so every wait here is bounded by
max_wait_steps.
"""

from __future__ import annotations

from .config import AcceleratorConfig
from .control import IDLE_CONTROL, Command, ControlWord, Mode, StepOutput
from .controller import (
    BLOCK_ROUNDS,
    FINAL_ROUNDS,
    INIT_ROUNDS,
    TAG_BYTES,
    AeadController,
)
from .errors import DriverTimeoutError
from .reference import validate_against_reference
from .results import SessionResult
from .trace import TraceRecorder

DEFAULT_MAX_WAIT_STEPS = 1000


class SessionDriver:
    """
    Drives one controller through complete sessions.

    Keeps a per-phase step breakdown of everything it drives.
    """

    def __init__(
        self,
        controller: AeadController | None = None,
        max_wait_steps: int = DEFAULT_MAX_WAIT_STEPS,
    ):
        if max_wait_steps < 1:
            raise ValueError(f"max_wait_steps must be >= 1, got {max_wait_steps}")
        self.controller = controller or AeadController()
        self.max_wait_steps = max_wait_steps
        self._breakdown: dict[str, int] = {}
        self.released: list[int] = []

    @property
    def config(self) -> AcceleratorConfig:
        return self.controller.config

    @property
    def breakdown(self) -> dict[str, int]:
        return dict(self._breakdown)

    def tick(
        self,
        data: int = 0,
        control: ControlWord = IDLE_CONTROL,
        reset: bool = False,
        label: str = "wait",
    ) -> StepOutput:
        """Advance the controller one step and account it under ``label``."""
        self._breakdown[label] = self._breakdown.get(label, 0) + 1
        return self.controller.step(data, control, reset=reset)

    # ------------------------------------------------------------------
    # Protocol phases
    # ------------------------------------------------------------------

    def reset(self, steps: int = 1) -> None:
        for _ in range(steps):
            self.tick(reset=True, label="reset")

    def load_key(self, key: bytes) -> None:
        if len(key) != 16:
            raise ValueError(f"Key must be 16 bytes, got {len(key)}")
        control = ControlWord(command=Command.LOAD_KEY)
        for byte in key:
            self.tick(byte, control, label="load_key")

    def load_nonce(self, nonce: bytes) -> None:
        if len(nonce) != 16:
            raise ValueError(f"Nonce must be 16 bytes, got {len(nonce)}")
        control = ControlWord(command=Command.LOAD_NONCE)
        for byte in nonce:
            self.tick(byte, control, label="load_nonce")

    def start(self, decrypt: bool = False) -> None:
        self.tick(control=ControlWord(start=True, decrypt=decrypt), label="start")
        self.settle(INIT_ROUNDS)

    def settle(self, rounds: int) -> None:
        """Idle for as many steps as a permutation of ``rounds`` takes."""
        for _ in range(self.config.permutation_steps(rounds)):
            self.tick(label="wait")

    def send_block(self, block: bytes, last: bool = False) -> None:
        """Stream one 8-byte block; ``last`` rides on the 8th byte."""
        if len(block) != 8:
            raise ValueError(f"Block must be 8 bytes, got {len(block)}")
        for i, byte in enumerate(block):
            control = ControlWord(command=Command.PROCESS, last=last and i == 7)
            self.tick(byte, control, label="process")
        self.settle(FINAL_ROUNDS if last else BLOCK_ROUNDS)

    def drain(self, count: int) -> bytes:
        """
        Collect ``count`` output bytes under read-acknowledge.

        read_ack is held; a byte transfers in every step that presents
        out_valid.

        Raises:
            DriverTimeoutError: If no byte appears within max_wait_steps
        """
        ack = ControlWord(read_ack=True)
        out = bytearray()
        waited = 0
        while len(out) < count:
            status = self.tick(control=ack, label="drain")
            if status.out_valid:
                out.append(status.data)
                self.released.append(status.data)
                waited = 0
                continue
            waited += 1
            if waited >= self.max_wait_steps:
                raise DriverTimeoutError(f"output byte {len(out)}", waited)
        return bytes(out)

    def wait_idle(self) -> None:
        """Idle until busy drops."""
        waited = 0
        while self.tick(label="wait").busy:
            waited += 1
            if waited >= self.max_wait_steps:
                raise DriverTimeoutError("busy to drop", waited)

    def idle(self, steps: int, mode: Mode = Mode.ASCON) -> None:
        """Present idle inputs (optionally with the mode line switched)."""
        control = ControlWord(mode=mode)
        for _ in range(steps):
            self.tick(control=control, label="wait")

    # ------------------------------------------------------------------
    # Whole sessions
    # ------------------------------------------------------------------

    def run(
        self,
        key: bytes,
        nonce: bytes,
        data: bytes,
        decrypt: bool = False,
        drain_between_blocks: bool = False,
    ) -> SessionResult:
        """
        Run one complete session from reset.

        Args:
            key: 16-byte key
            nonce: 16-byte nonce
            data: Plaintext (encrypt) or ciphertext (decrypt), whole blocks
            decrypt: Select decryption
            drain_between_blocks: Collect each block's bytes before sending
                the next one instead of draining everything at the end

        Returns:
            SessionResult checked against the batch reference
        """
        if not data or len(data) % 8:
            raise ValueError(
                f"Data must be a non-empty multiple of 8 bytes, got {len(data)}"
            )

        self.controller.reset_counters()
        self._breakdown = {}
        self.released = []

        self.reset()
        self.load_key(key)
        self.load_nonce(nonce)
        self.start(decrypt)

        collected = bytearray()
        num_blocks = len(data) // 8
        for i in range(num_blocks):
            last = i == num_blocks - 1
            self.send_block(data[i * 8:(i + 1) * 8], last=last)
            if drain_between_blocks and not last:
                collected += self.drain(8)

        collected += self.drain(len(data) + TAG_BYTES - len(collected))
        output, tag = bytes(collected[:-TAG_BYTES]), bytes(collected[-TAG_BYTES:])

        correct, error = validate_against_reference(key, nonce, data, output, tag, decrypt)

        breakdown = self.breakdown
        result = SessionResult(
            output=output,
            tag=tag,
            decrypt=decrypt,
            correct=correct,
            error_detail=error,
            steps_total=sum(v for k, v in breakdown.items() if k != "reset"),
            step_breakdown=breakdown,
            rounds_total=self.controller.round_counter.total,
            round_breakdown=self.controller.round_counter.by_purpose,
            ignored_inputs=self.controller.ignored_inputs,
        )
        if self.controller.busy:
            result.add_warning("Core still busy after draining all expected bytes")
        if self.config.rounds_per_step is not None:
            result.add_note(f"{self.config.rounds_per_step} permutation round(s) per step")
        return result


def run_session(
    key: bytes,
    nonce: bytes,
    data: bytes,
    decrypt: bool = False,
    config: AcceleratorConfig | None = None,
    tracer: TraceRecorder | None = None,
) -> SessionResult:
    """
    Convenience function to run one session on a fresh controller.

    Returns:
        SessionResult for the session
    """
    driver = SessionDriver(AeadController(config=config, tracer=tracer))
    return driver.run(key, nonce, data, decrypt=decrypt)
