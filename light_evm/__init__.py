"""
A minimal EVM interpreter for educational purposes.

Executes STOP, ADD, MUL and PUSH1 over a 32-bit operand stack.
"""

__version__ = "0.1.0"

from .logging_config import configure_default_logging

configure_default_logging()

from .core import (
    Evm,
    EvmError,
    Halt,
    InvalidBytecode,
    InvalidOpcode,
    MachineSnapshot,
    MissingPushData,
    Opcode,
    StackOverflow,
    StackUnderflow,
    StepLimitExceeded,
)
from .utils import disassemble_bytecode, parse_bytecode

__all__ = [
    "__version__",
    "Evm",
    "MachineSnapshot",
    "Opcode",
    "EvmError",
    "Halt",
    "InvalidBytecode",
    "InvalidOpcode",
    "MissingPushData",
    "StackOverflow",
    "StackUnderflow",
    "StepLimitExceeded",
    "disassemble_bytecode",
    "parse_bytecode",
]
