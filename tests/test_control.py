"""Tests for the command decoder and status packing."""

import pytest

from ascon_accel.control import Command, ControlWord, Mode, StepOutput


class TestFromBus:
    """Decoding packed control bytes."""

    def test_idle(self) -> None:
        cw = ControlWord.from_bus(0)
        assert cw == ControlWord()
        assert cw.command is Command.NONE

    def test_load_key(self) -> None:
        assert ControlWord.from_bus(0b01_0_0_0_000).command is Command.LOAD_KEY

    def test_load_nonce(self) -> None:
        assert ControlWord.from_bus(0b10_0_0_0_000).command is Command.LOAD_NONCE

    def test_process_with_last(self) -> None:
        cw = ControlWord.from_bus((0b11 << 6) | (1 << 5))
        assert cw.command is Command.PROCESS
        assert cw.last is True
        assert cw.start is False

    def test_start_decrypt(self) -> None:
        cw = ControlWord.from_bus(0b00_0_1_1_000)
        assert cw.start is True
        assert cw.decrypt is True
        assert cw.command is Command.NONE

    def test_read_ack(self) -> None:
        assert ControlWord.from_bus(0b100).read_ack is True

    def test_mode_travels_beside_byte(self) -> None:
        cw = ControlWord.from_bus(0, mode=Mode.EXTERNAL)
        assert cw.mode is Mode.EXTERNAL

    @pytest.mark.parametrize("value", [-1, 256])
    def test_out_of_range(self, value: int) -> None:
        with pytest.raises(ValueError, match="Control byte"):
            ControlWord.from_bus(value)


class TestToBus:
    """Packing control words."""

    def test_process_last(self) -> None:
        cw = ControlWord(command=Command.PROCESS, last=True)
        assert cw.to_bus() == 0b1110_0000

    def test_start_encrypt(self) -> None:
        assert ControlWord(start=True).to_bus() == 0b0001_0000

    def test_every_field_survives_packing(self) -> None:
        cw = ControlWord(
            command=Command.LOAD_NONCE, start=True, decrypt=True, last=True, read_ack=True,
        )
        assert ControlWord.from_bus(cw.to_bus()) == cw

    def test_describe(self) -> None:
        cw = ControlWord(command=Command.PROCESS, last=True)
        assert cw.describe() == "PROCESS+last"


class TestStepOutput:
    """Status byte packing."""

    def test_idle_status(self) -> None:
        assert StepOutput().status_bits == 0

    def test_busy_and_valid(self) -> None:
        assert StepOutput(busy=True).status_bits == 0b01
        assert StepOutput(out_valid=True).status_bits == 0b10
        assert StepOutput(data=0x5A, busy=True, out_valid=True).status_bits == 0b11
