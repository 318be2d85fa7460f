from .bytecode import disassemble_bytecode, format_disassembly, parse_bytecode
from .trace import (
    KeypressConfirmation,
    RecordingTracer,
    Tracer,
    format_progress,
    format_stack,
    no_confirmation,
)

__all__ = [
    "disassemble_bytecode",
    "format_disassembly",
    "parse_bytecode",
    "KeypressConfirmation",
    "RecordingTracer",
    "Tracer",
    "format_progress",
    "format_stack",
    "no_confirmation",
]
