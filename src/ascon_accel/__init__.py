"""Ascon-128 byte-serial AEAD accelerator model.

Step-accurate model of an area-constrained Ascon-128 core behind an
8-bit data bus: permutation engine, cipher state, session FSM,
byte-serial adapter and command decoder, plus a batch reference.
"""

__version__ = "0.1.0"

from .config import AcceleratorConfig
from .control import Command, ControlWord, Mode, StepOutput
from .controller import AeadController, Phase
from .driver import SessionDriver, run_session
from .errors import AsconAccelError, CapacityError, DriverTimeoutError, ProtocolMisuseError
from .permutation import permute, permute_rounds
from .reference import KNOWN_ANSWER_VECTORS, ascon_decrypt, ascon_encrypt, verify_tag
from .results import SessionResult
from .trace import TraceRecorder

__all__ = [
    "AcceleratorConfig",
    "AeadController",
    "AsconAccelError",
    "CapacityError",
    "Command",
    "ControlWord",
    "DriverTimeoutError",
    "KNOWN_ANSWER_VECTORS",
    "Mode",
    "Phase",
    "ProtocolMisuseError",
    "SessionDriver",
    "SessionResult",
    "StepOutput",
    "TraceRecorder",
    "ascon_decrypt",
    "ascon_encrypt",
    "permute",
    "permute_rounds",
    "run_session",
    "verify_tag",
]
