"""
Execution engine.

``Evm`` owns the machine state (program counter, operand stack, memory and
code) and runs the fetch-decode-execute loop over it. Instruction semantics
live in ``opcodes``; presentation (tracing, single-step pauses) is delegated
to a tracer and a confirmation callable so the loop can run headless.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import structlog

from .exceptions import (
    EvmError,
    Halt,
    InvalidOpcode,
    StackOverflow,
    StackUnderflow,
    StepLimitExceeded,
)
from .opcodes import WORD_MASK, Opcode, decode_opcode
from ..utils.trace import Confirmation, KeypressConfirmation, Tracer

logger = structlog.get_logger()


@dataclass(frozen=True)
class MachineSnapshot:
    """Immutable copy of the machine state at one point in time."""

    pc: int
    stack: Tuple[int, ...]
    memory: bytes
    steps: int


class Evm:
    """The interpreter, responsible for executing bytecode."""

    def __init__(
        self,
        code: Union[bytes, bytearray, List[int]],
        trace: bool = False,
        step_by_step: bool = False,
        tracer: Optional[Tracer] = None,
        confirm: Optional[Confirmation] = None,
        max_steps: Optional[int] = None,
        max_stack_depth: Optional[int] = None,
    ):
        """
        Create an interpreter for ``code``. Any byte sequence is accepted;
        problems surface when the offending byte is decoded.

        Args:
            code: The bytecode to execute
            trace: Print the bytecode before and the stack after each instruction
            step_by_step: Wait for ``confirm`` before executing each instruction
            tracer: Destination for trace output (stdout by default)
            confirm: Blocking confirmation source used in step-by-step mode
            max_steps: Optional bound on executed instructions
            max_stack_depth: Optional bound on the operand stack size
        """
        self.code = bytes(code)
        self.pc = 0
        self.stack: List[int] = []
        self.memory = bytearray()
        self.trace = trace
        self.step_by_step = step_by_step
        self.tracer = tracer if tracer is not None else Tracer()
        if confirm is None and step_by_step:
            confirm = KeypressConfirmation()
        self.confirm = confirm
        self.max_steps = max_steps
        self.max_stack_depth = max_stack_depth
        self.steps = 0

    @property
    def stack_depth(self) -> int:
        return len(self.stack)

    def decode_next(self) -> Opcode:
        """
        Decode the instruction at the program counter without executing it.

        Raises:
            InvalidOpcode: if the byte is unsupported or pc is past the end of code
        """
        opcode = decode_opcode(self.code, self.pc)
        if opcode is None:
            value = self.code[self.pc] if 0 <= self.pc < len(self.code) else None
            raise InvalidOpcode(self.pc, value)
        return opcode

    def step(self) -> None:
        """
        Decode and execute one instruction.

        Raises:
            Halt: when STOP is executed
            EvmError: on any decode or execution failure
        """
        if self.max_steps is not None and self.steps >= self.max_steps:
            raise StepLimitExceeded(self.pc, self.max_steps)

        opcode = self.decode_next()

        if self.step_by_step and self.confirm is not None:
            self.confirm()

        logger.debug("Executing instruction", pc=self.pc, opcode=opcode.mnemonic)
        if self.trace:
            self.tracer.before_step(self.code, self.pc)
        opcode.execute(self)
        self.steps += 1
        if self.trace:
            self.tracer.after_step(self.stack)

    def run(self) -> None:
        """
        Execute until STOP.

        There is no implicit bound on the number of steps: code that never
        reaches STOP and never fails keeps running unless ``max_steps`` is set.

        Raises:
            EvmError: the first failure encountered; state is left as it was
                at the failing instruction
        """
        logger.info(
            "Starting execution",
            code_size=len(self.code),
            trace=self.trace,
            step_by_step=self.step_by_step,
        )
        if self.step_by_step:
            prompt = getattr(self.confirm, "prompt", None)
            if prompt:
                self.note(prompt)
        while True:
            try:
                self.step()
            except Halt as halt:
                logger.info("Execution halted", pc=halt.pc, steps=self.steps)
                return
            except EvmError as e:
                logger.warning(
                    "Execution failed",
                    error=type(e).__name__,
                    pc=e.pc,
                    steps=self.steps,
                )
                raise

    def push(self, value: int) -> None:
        """
        Add value to stack
        [...] -> [..., value]
        """
        if self.max_stack_depth is not None and len(self.stack) >= self.max_stack_depth:
            raise StackOverflow(self.pc, self.max_stack_depth)
        self.stack.append(value & WORD_MASK)

    def pop(self) -> int:
        """
        Pop value from stack
        [..., x] -> [...]
        """
        if not self.stack:
            raise StackUnderflow(self.pc, required=1, available=0)
        return self.stack.pop()

    def peek(self, index: int = 0) -> int:
        """Access stack item without popping (0 is top)."""
        if index < 0 or index >= len(self.stack):
            raise StackUnderflow(self.pc, required=index + 1, available=len(self.stack))
        return self.stack[-(index + 1)]

    def note(self, msg: str) -> None:
        """Forward a message to the tracer when tracing is enabled."""
        if self.trace:
            self.tracer.note(msg)

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(
            pc=self.pc,
            stack=tuple(self.stack),
            memory=bytes(self.memory),
            steps=self.steps,
        )
