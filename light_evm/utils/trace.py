"""
Human-readable tracing of machine state.

The tracer renders the code with a marker under the program counter before
each instruction and the operand stack after it. Output is plain text meant
for a terminal, not a parseable format.
"""

import sys
from typing import Callable, List, Optional, Sequence, TextIO

import structlog

logger = structlog.get_logger()

BYTES_PER_ROW = 16
MARKER = "↑"
SEPARATOR = "┅" * 10

# Called before each instruction in step-by-step mode; returns once the user
# has confirmed.
Confirmation = Callable[[], None]


def format_progress(code: bytes, pc: int) -> str:
    """
    Render ``code`` as rows of hex bytes with a marker under ``pc``.

    Args:
        code: The bytecode being executed
        pc: Current program counter

    Returns:
        Multi-line string
    """
    lines = ["Bytecode:"]
    rows = [code[i : i + BYTES_PER_ROW] for i in range(0, len(code), BYTES_PER_ROW)]
    marker_row = pc // BYTES_PER_ROW
    for index, row in enumerate(rows):
        lines.append(" ".join(f"{byte:02x}" for byte in row))
        if index == marker_row:
            lines.append(" " * ((pc % BYTES_PER_ROW) * 3) + MARKER)
    if marker_row >= len(rows):
        lines.append(" " * ((pc % BYTES_PER_ROW) * 3) + MARKER)
    return "\n".join(lines)


def format_stack(stack: Sequence[int], min_slots: int = 1) -> str:
    """Render the stack top-to-bottom inside a box; empty slots pad to ``min_slots``."""
    width = max([2] + [len(f"{value:x}") for value in stack])
    bar = "─" * (width + 2)
    lines = ["Stack:", f"╭{bar}╮"]
    for value in reversed(stack):
        lines.append(f"│ {value:0{width}x} │")
        lines.append(f"├{bar}┤")
    for _ in range(len(stack), min_slots):
        lines.append(f"│{' ' * (width + 2)}│")
        lines.append(f"├{bar}┤")
    return "\n".join(lines)


class Tracer:
    """Writes trace output to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None, min_stack_slots: int = 1):
        self._stream = stream
        self.min_stack_slots = min_stack_slots

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stdout

    def message(self, msg: str) -> None:
        print(msg, file=self.stream)

    def note(self, msg: str) -> None:
        """One-line description of an executed instruction."""
        self.message(msg)

    def before_step(self, code: bytes, pc: int) -> None:
        self.message(SEPARATOR)
        self.message(format_progress(code, pc))

    def after_step(self, stack: Sequence[int]) -> None:
        self.message(format_stack(stack, self.min_stack_slots))


class RecordingTracer(Tracer):
    """Keeps trace output in memory; handy in tests and for embedding."""

    def __init__(self, min_stack_slots: int = 1):
        super().__init__(min_stack_slots=min_stack_slots)
        self.lines: List[str] = []

    def message(self, msg: str) -> None:
        self.lines.extend(msg.split("\n"))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def no_confirmation() -> None:
    """Confirmation source that never blocks."""


class KeypressConfirmation:
    """
    Block until ``key`` is read from ``stream``.

    Terminals deliver input line by line, so the user types the key followed
    by Enter. Any other characters are ignored. At end of input the pause is
    disabled and execution continues unpaced.
    """

    def __init__(self, key: str = "p", stream: Optional[TextIO] = None):
        if len(key) != 1:
            raise ValueError("Confirmation key must be a single character")
        self.key = key
        self._stream = stream
        self.exhausted = False

    @property
    def prompt(self) -> str:
        return f"Press '{self.key}' to proceed to the next step."

    def __call__(self) -> None:
        if self.exhausted:
            return
        stream = self._stream if self._stream is not None else sys.stdin
        while True:
            char = stream.read(1)
            if char == "":
                logger.warning("Input closed, continuing without pausing")
                self.exhausted = True
                return
            if char == self.key:
                return
