"""
Counters for step and permutation-round tracking.
"""


class StepCounter:
    """
    Tracks the number of steps (clock cycles) the controller has advanced.
    """

    def __init__(self):
        self._count = 0

    def increment(self, amount: int = 1) -> None:
        """Add steps to the counter."""
        self._count += amount

    def reset(self) -> None:
        """Reset counter to zero."""
        self._count = 0

    @property
    def count(self) -> int:
        """Get current step count."""
        return self._count

    def __repr__(self) -> str:
        return f"StepCounter(count={self._count})"


class RoundCounter:
    """
    Tracks permutation rounds evaluated, broken down by purpose.

    Purposes used by the controller are ``init``, ``inter_block`` and
    ``finalize``; any other label is accepted.
    """

    def __init__(self):
        self._total = 0
        self._by_purpose: dict[str, int] = {}
        self._permutations = 0

    def add(self, rounds: int, purpose: str = "") -> None:
        """
        Record evaluated rounds.

        Args:
            rounds: Number of rounds evaluated
            purpose: Why the permutation ran
        """
        self._total += rounds
        if purpose:
            self._by_purpose[purpose] = self._by_purpose.get(purpose, 0) + rounds

    def complete(self) -> None:
        """Record that a whole permutation finished."""
        self._permutations += 1

    def reset(self) -> None:
        """Reset all counters to zero."""
        self._total = 0
        self._by_purpose.clear()
        self._permutations = 0

    @property
    def total(self) -> int:
        """Total rounds evaluated."""
        return self._total

    @property
    def permutations(self) -> int:
        """Number of completed permutations."""
        return self._permutations

    @property
    def by_purpose(self) -> dict[str, int]:
        """Rounds broken down by purpose."""
        return dict(self._by_purpose)

    def summary(self) -> str:
        """Return a summary string of round usage."""
        lines = [f"Total rounds: {self._total} ({self._permutations} permutations)"]
        if self._by_purpose:
            lines.append("By purpose:")
            for purpose in sorted(self._by_purpose):
                lines.append(f"  {purpose}: {self._by_purpose[purpose]} rounds")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"RoundCounter(total={self._total})"
