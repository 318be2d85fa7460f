"""Conversion between textual and binary bytecode."""

import binascii
import re
from typing import List, Optional, Tuple, Union

from ..core.exceptions import InvalidBytecode
from ..core.opcodes import OPCODE_NAMES, PUSH_BYTES

_WHITESPACE = re.compile(r"\s+")


def parse_bytecode(bytecode_str: str) -> bytes:
    """
    Parse bytecode from its hex string.

    Whitespace anywhere in the string is ignored, digits may be upper or lower
    case and the ``0x`` prefix is optional. An empty string yields empty code.

    Args:
        bytecode_str: Hexadecimal string, e.g. ``"0x6005600601"``

    Returns:
        The decoded bytes

    Raises:
        InvalidBytecode: on an odd number of digits or a non-hex character
    """
    cleaned = _WHITESPACE.sub("", bytecode_str)
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    if len(cleaned) % 2:
        raise InvalidBytecode(
            f"Invalid bytecode: odd number of hex digits ({len(cleaned)})"
        )
    try:
        return binascii.unhexlify(cleaned)
    except (binascii.Error, ValueError) as e:
        raise InvalidBytecode(f"Invalid bytecode: {e}") from e


def disassemble_bytecode(
    bytecode: Union[str, bytes],
) -> List[Tuple[str, int, Optional[bytes], int]]:
    """
    Disassemble bytecode into a list of operations.

    Unsupported bytes are reported as ``UNKNOWN_xx``; a PUSH whose immediate
    runs past the end of code keeps whatever bytes remain.

    Args:
        bytecode: Hexadecimal string or raw bytes

    Returns:
        List of tuples (opcode_name, opcode_value, push_data, offset)
    """
    code = parse_bytecode(bytecode) if isinstance(bytecode, str) else bytes(bytecode)
    operations = []
    i = 0

    while i < len(code):
        opcode_value = code[i]
        offset = i
        i += 1

        opcode_name = OPCODE_NAMES.get(opcode_value, f"UNKNOWN_{opcode_value:02x}")

        push_data = None
        push_bytes = PUSH_BYTES.get(opcode_value)
        if push_bytes:
            push_data = code[i : i + push_bytes]
            i = min(i + push_bytes, len(code))

        operations.append((opcode_name, opcode_value, push_data, offset))

    return operations


def format_disassembly(operations: List[Tuple[str, int, Optional[bytes], int]]) -> str:
    lines = []
    for name, _, push_data, offset in operations:
        line = f"{offset:04x}: {name}"
        if push_data is not None:
            line += f" 0x{push_data.hex()}" if push_data else " <missing>"
        lines.append(line)
    return "\n".join(lines)
