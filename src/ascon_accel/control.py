"""
Command decoder: the per-step control word and status outputs.

Packed bus layout of the control byte (mode select travels separately,
on the shared mode line):

  bit 7..6  cmd       00 none, 01 load_key, 10 load_nonce, 11 process
  bit 5     last      last-block flag (sampled on the 8th byte of a block)
  bit 4     start     start strobe
  bit 3     decrypt   decrypt-select (sampled with start)
  bit 2     read_ack  read-acknowledge strobe
  bit 1..0  unused    (status outputs on the bidirectional pins)

Status byte:

  bit 0     busy
  bit 1     out_valid
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Mode(enum.IntEnum):
    """Shared mode line: which accelerator owns the pins."""

    ASCON = 0
    EXTERNAL = 1


class Command(enum.IntEnum):
    """2-bit command field."""

    NONE = 0b00
    LOAD_KEY = 0b01
    LOAD_NONCE = 0b10
    PROCESS = 0b11


CMD_SHIFT = 6
LAST_BIT = 1 << 5
START_BIT = 1 << 4
DECRYPT_BIT = 1 << 3
READ_ACK_BIT = 1 << 2

BUSY_BIT = 1 << 0
OUT_VALID_BIT = 1 << 1


@dataclass(frozen=True)
class ControlWord:
    """Decoded control inputs for one step."""

    mode: Mode = Mode.ASCON
    command: Command = Command.NONE
    start: bool = False
    decrypt: bool = False
    last: bool = False
    read_ack: bool = False

    @classmethod
    def from_bus(cls, value: int, mode: Mode = Mode.ASCON) -> ControlWord:
        """
        Decode a packed control byte.

        Args:
            value: Control byte (0..255)
            mode: Level of the shared mode line

        Returns:
            Decoded ControlWord
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Control byte must be 0..255, got {value}")
        return cls(
            mode=Mode(mode),
            command=Command((value >> CMD_SHIFT) & 0b11),
            start=bool(value & START_BIT),
            decrypt=bool(value & DECRYPT_BIT),
            last=bool(value & LAST_BIT),
            read_ack=bool(value & READ_ACK_BIT),
        )

    def to_bus(self) -> int:
        """Pack into the control byte (mode is not part of the byte)."""
        value = int(self.command) << CMD_SHIFT
        if self.last:
            value |= LAST_BIT
        if self.start:
            value |= START_BIT
        if self.decrypt:
            value |= DECRYPT_BIT
        if self.read_ack:
            value |= READ_ACK_BIT
        return value

    def describe(self) -> str:
        """Compact text form for traces, e.g. ``PROCESS+last``."""
        parts = [self.command.name]
        for flag in ("start", "decrypt", "last", "read_ack"):
            if getattr(self, flag):
                parts.append(flag)
        if self.mode != Mode.ASCON:
            parts.append(f"mode={self.mode.name}")
        return "+".join(parts)


IDLE_CONTROL = ControlWord()


@dataclass(frozen=True)
class StepOutput:
    """Outputs presented by the core during one step."""

    data: int = 0
    busy: bool = False
    out_valid: bool = False

    @property
    def status_bits(self) -> int:
        """Pack busy/out_valid into the status byte."""
        return (BUSY_BIT if self.busy else 0) | (OUT_VALID_BIT if self.out_valid else 0)
