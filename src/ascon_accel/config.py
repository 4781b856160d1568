"""Configuration for the accelerator model."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class AcceleratorConfig:
    """Configuration object for the Ascon accelerator model.

    Passed to the controller and to drivers; drives misuse handling,
    permutation latency and trace verbosity.
    """

    # Raise ProtocolMisuseError / CapacityError instead of tolerating misuse
    strict: bool = False

    # Permutation rounds evaluated per step.
    # None = a whole permutation completes in the step that triggers it
    rounds_per_step: int | None = None

    # Include the five state words in every trace record
    trace_state: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.rounds_per_step is not None and not 1 <= self.rounds_per_step <= 12:
            raise ValueError(
                f"rounds_per_step must be 1..12 or None, got {self.rounds_per_step}"
            )

    @property
    def combinational(self) -> bool:
        """True when permutations finish within their triggering step."""
        return self.rounds_per_step is None

    def permutation_steps(self, rounds: int) -> int:
        """Number of extra steps a permutation of ``rounds`` rounds occupies."""
        if self.rounds_per_step is None:
            return 0
        return math.ceil(rounds / self.rounds_per_step)
