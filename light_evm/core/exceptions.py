"""Error types raised while decoding and executing bytecode."""

from typing import Optional


class EvmError(Exception):
    """Base class for every failure reported by the interpreter."""

    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(message)
        self.pc = pc


class InvalidBytecode(EvmError):
    """The textual bytecode could not be decoded into bytes."""


class InvalidOpcode(EvmError):
    """The byte at the program counter is not a supported instruction."""

    def __init__(self, pc: int, opcode: Optional[int] = None):
        if opcode is None:
            message = f"Invalid opcode: pc {pc} is past the end of code"
        else:
            message = f"Invalid opcode 0x{opcode:02x} at pc {pc}"
        super().__init__(message, pc)
        self.opcode = opcode


class StackUnderflow(EvmError):
    """An instruction needs more operands than the stack holds."""

    def __init__(self, pc: int, mnemonic: str = "", required: int = 1, available: int = 0):
        where = f"{mnemonic} at pc {pc}" if mnemonic else f"pc {pc}"
        super().__init__(
            f"Stack underflow: {where} needs {required} item(s), found {available}", pc
        )
        self.mnemonic = mnemonic
        self.required = required
        self.available = available


class StackOverflow(EvmError):
    """Pushing would exceed the configured maximum stack depth."""

    def __init__(self, pc: int, limit: int):
        super().__init__(f"Stack overflow: depth limit {limit} reached at pc {pc}", pc)
        self.limit = limit


class MissingPushData(EvmError):
    """A PUSH instruction's immediate operand lies past the end of code."""

    def __init__(self, pc: int, width: int = 1):
        super().__init__(
            f"Missing push data: expected {width} byte(s) after pc {pc}", pc
        )
        self.width = width


class StepLimitExceeded(EvmError):
    """The run executed more instructions than the configured limit."""

    def __init__(self, pc: int, limit: int):
        super().__init__(f"Step limit of {limit} exceeded at pc {pc}", pc)
        self.limit = limit


class Halt(Exception):
    """Raised by STOP to end a run successfully. Not an EvmError."""

    def __init__(self, pc: int):
        super().__init__("STOP")
        self.pc = pc
