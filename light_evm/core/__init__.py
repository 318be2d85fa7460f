from .exceptions import (
    EvmError,
    Halt,
    InvalidBytecode,
    InvalidOpcode,
    MissingPushData,
    StackOverflow,
    StackUnderflow,
    StepLimitExceeded,
)
from .machine import Evm, MachineSnapshot
from .opcodes import OPCODE_NAMES, PUSH_BYTES, STACK_EFFECTS, Opcode

__all__ = [
    "Evm",
    "MachineSnapshot",
    "Opcode",
    "OPCODE_NAMES",
    "PUSH_BYTES",
    "STACK_EFFECTS",
    "EvmError",
    "Halt",
    "InvalidBytecode",
    "InvalidOpcode",
    "MissingPushData",
    "StackOverflow",
    "StackUnderflow",
    "StepLimitExceeded",
]
