"""
Instruction set for the interpreter.

Every supported instruction is a member of ``Opcode``. Decoding maps a byte to
a member; executing a member applies its transformation to an ``Evm`` passed
in for the duration of the call. Handlers advance the program counter
themselves since the advance depends on the instruction's immediate width.
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from .exceptions import Halt, MissingPushData, StackUnderflow

if TYPE_CHECKING:  # pragma: no cover
    from .machine import Evm

WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1


class Opcode(IntEnum):
    """Supported opcodes"""

    STOP = 0x00
    ADD = 0x01
    MUL = 0x02

    PUSH1 = 0x60

    @classmethod
    def from_byte(cls, value: int) -> Optional["Opcode"]:
        """Return the opcode encoded by ``value``, or None if unsupported."""
        return _BY_VALUE.get(value)

    @property
    def mnemonic(self) -> str:
        return self.name

    @property
    def immediate_size(self) -> int:
        """Number of operand bytes following the opcode byte."""
        return PUSH_BYTES.get(self, 0)

    @property
    def stack_effect(self) -> Tuple[int, int]:
        """(items popped, items pushed)"""
        return STACK_EFFECTS[self]

    def execute(self, evm: "Evm") -> None:
        """
        Apply this instruction to the machine state.

        Arity is checked up front so a failing instruction leaves the stack
        and program counter untouched.

        Raises:
            Halt: for STOP
            StackUnderflow: if the stack holds fewer items than the opcode pops
            MissingPushData: if a PUSH operand runs past the end of code
        """
        pops, _ = self.stack_effect
        if evm.stack_depth < pops:
            raise StackUnderflow(evm.pc, self.mnemonic, pops, evm.stack_depth)
        _HANDLERS[self](evm)


_BY_VALUE = {int(op): op for op in Opcode}

# Map from opcode value to name
OPCODE_NAMES = {int(code): name for name, code in Opcode.__members__.items()}

# Map from opcode to number of bytes to read for PUSH operations
PUSH_BYTES = {Opcode.PUSH1: 1}

# Map from opcode to stack in, stack out counts
STACK_EFFECTS = {
    Opcode.STOP: (0, 0),
    Opcode.ADD: (2, 1),
    Opcode.MUL: (2, 1),
    Opcode.PUSH1: (0, 1),
}


def _stop(evm: "Evm") -> None:
    raise Halt(evm.pc)


def _add(evm: "Evm") -> None:
    """ADD: [..., b, a] -> [..., a + b]"""
    a = evm.pop()
    b = evm.pop()
    result = (a + b) & WORD_MASK
    evm.push(result)
    evm.note(f"ADD: {a} + {b} => {result}")
    evm.pc += 1


def _mul(evm: "Evm") -> None:
    """MUL: [..., b, a] -> [..., a * b]"""
    a = evm.pop()
    b = evm.pop()
    result = (a * b) & WORD_MASK
    evm.push(result)
    evm.note(f"MUL: {a} * {b} => {result}")
    evm.pc += 1


def _push(evm: "Evm") -> None:
    """PUSHn: [...] -> [..., immediate], immediate zero-extended to a word."""
    width = PUSH_BYTES[Opcode(evm.code[evm.pc])]
    start = evm.pc + 1
    end = start + width
    if end > len(evm.code):
        raise MissingPushData(evm.pc, width)
    value = int.from_bytes(evm.code[start:end], "big")
    evm.push(value)
    evm.note(f"PUSH{width}({value})")
    evm.pc = end


_HANDLERS: Dict[Opcode, Callable[["Evm"], None]] = {
    Opcode.STOP: _stop,
    Opcode.ADD: _add,
    Opcode.MUL: _mul,
    Opcode.PUSH1: _push,
}


def _check_tables() -> None:
    for table_name, table in (("handler", _HANDLERS), ("stack effect", STACK_EFFECTS)):
        missing = [op.name for op in Opcode if op not in table]
        if missing:
            raise RuntimeError(f"Opcodes without a {table_name}: {', '.join(missing)}")


_check_tables()


def decode_opcode(code: bytes, pc: int) -> Optional[Opcode]:
    """Decode the instruction at ``pc``; None when unsupported or past the end."""
    if pc < 0 or pc >= len(code):
        return None
    return Opcode.from_byte(code[pc])

