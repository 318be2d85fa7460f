#!/usr/bin/env python3
"""
Command line entry point for the interpreter.

Example:
    light-evm --bytecode 0x600560060160020200 --no-step
"""

import argparse
import sys
from typing import List, Mapping, Optional

import structlog

from . import __version__
from .config import (
    CONFIRM_KEY,
    DEFAULT_LOG_LEVEL,
    LOG_LEVELS,
    EvmConfig,
    env_default,
    env_int,
)
from .core.exceptions import EvmError, InvalidBytecode
from .core.machine import Evm
from .logging_config import configure_logging
from .utils.bytecode import disassemble_bytecode, format_disassembly, parse_bytecode
from .utils.trace import KeypressConfirmation

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_EXECUTION_ERROR = 1
EXIT_CONFIG_ERROR = 2


def create_parser(environ: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    """Build the argument parser; option defaults may come from LIGHT_EVM_* variables."""
    parser = argparse.ArgumentParser(
        prog="light-evm",
        description="A minimal EVM interpreter (for educational purpose)",
    )
    parser.add_argument("-b", "--bytecode", required=True, help="The bytecode to be executed")
    parser.add_argument(
        "-v",
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Enable logging of EVM operations (default: on)",
    )
    parser.add_argument(
        "-s",
        "--step",
        action=argparse.BooleanOptionalAction,
        default=True,
        help=f"Enable step by step execution, press '{CONFIRM_KEY}' then Enter to advance (default: on)",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=env_int("MAX_STEPS", environ),
        help="Abort after this many instructions (default: unbounded)",
    )
    parser.add_argument(
        "--max-stack-depth",
        type=int,
        default=env_int("MAX_STACK_DEPTH", environ),
        help="Abort when the stack would grow past this depth (default: unbounded)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=env_default("LOG_LEVEL", DEFAULT_LOG_LEVEL, environ),
        choices=LOG_LEVELS,
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument(
        "-d",
        "--disassemble",
        action="store_true",
        help="Print the instruction listing instead of executing",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None):
    """Parse ``argv`` into an ``EvmConfig``; exits with status 2 on bad arguments."""
    try:
        parser = create_parser(environ)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(EXIT_CONFIG_ERROR)
    args = parser.parse_args(argv)
    try:
        config = EvmConfig(
            bytecode=args.bytecode,
            trace=args.verbose,
            step_by_step=args.step,
            max_steps=args.max_steps,
            max_stack_depth=args.max_stack_depth,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))
    return config, args.disassemble


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    config, disassemble = build_config(argv, environ)
    configure_logging(config.log_level)

    try:
        bytecode = parse_bytecode(config.bytecode)
    except InvalidBytecode as e:
        logger.error("Failed to parse bytecode", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if disassemble:
        print(format_disassembly(disassemble_bytecode(bytecode)))
        return EXIT_OK

    evm = Evm(
        bytecode,
        trace=config.trace,
        step_by_step=config.step_by_step,
        confirm=KeypressConfirmation(CONFIRM_KEY),
        max_steps=config.max_steps,
        max_stack_depth=config.max_stack_depth,
    )
    try:
        evm.run()
    except EvmError as e:
        logger.debug("State at failure", snapshot=evm.snapshot())
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_EXECUTION_ERROR

    print("Execution completed successfully")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
