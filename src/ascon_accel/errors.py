"""Exception types raised by the accelerator model and its drivers."""


class AsconAccelError(Exception):
    """Base class for accelerator model errors."""


class ProtocolMisuseError(AsconAccelError):
    """A command was issued out of the required protocol order.

    Only raised when the controller runs with ``strict=True``; the default
    permissive controller ignores or tolerates the offending input instead.
    """

    def __init__(self, phase: str, detail: str):
        self.phase = phase
        self.detail = detail
        super().__init__(f"{detail} (phase={phase})")


class CapacityError(AsconAccelError):
    """More than 16 bytes were offered for a key or nonce register."""

    def __init__(self, register: str, capacity: int = 16):
        self.register = register
        self.capacity = capacity
        super().__init__(f"{register} register already holds {capacity} bytes")


class DriverTimeoutError(AsconAccelError):
    """The driving caller gave up waiting for the core."""

    def __init__(self, waiting_for: str, steps: int):
        self.waiting_for = waiting_for
        self.steps = steps
        super().__init__(f"Timed out after {steps} steps waiting for {waiting_for}")
