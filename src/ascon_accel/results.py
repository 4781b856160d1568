"""Session result data structure."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SessionResult:
    """Result of one accelerator session with full accounting."""

    # Core result
    output: bytes
    tag: bytes
    decrypt: bool = False
    correct: bool = True
    error_detail: str = ""

    # Step accounting
    steps_total: int = 0
    step_breakdown: dict[str, int] = field(default_factory=dict)

    # Permutation accounting
    rounds_total: int = 0
    round_breakdown: dict[str, int] = field(default_factory=dict)

    # Inputs the core ignored (permissive misuse handling)
    ignored_inputs: int = 0

    # Notes and warnings
    notes: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Ensure breakdown dicts have default keys."""
        for key in ("load_key", "load_nonce", "start", "process", "wait", "drain"):
            self.step_breakdown.setdefault(key, 0)
        for key in ("init", "inter_block", "finalize"):
            self.round_breakdown.setdefault(key, 0)

    @property
    def blocks(self) -> int:
        return len(self.output) // 8

    def add_note(self, note: str) -> None:
        """Add an informational note."""
        self.notes.append(note)

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "output_hex": self.output.hex(),
            "tag_hex": self.tag.hex(),
            "decrypt": self.decrypt,
            "correct": self.correct,
            "error_detail": self.error_detail,
            "blocks": self.blocks,
            "steps_total": self.steps_total,
            "step_breakdown": self.step_breakdown,
            "rounds_total": self.rounds_total,
            "round_breakdown": self.round_breakdown,
            "ignored_inputs": self.ignored_inputs,
            "notes": self.notes,
            "warnings": self.warnings,
        }
