"""Run configuration for the command line interpreter."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "LIGHT_EVM_"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_LOG_LEVEL = "WARNING"
CONFIRM_KEY = "p"


@dataclass
class EvmConfig:
    bytecode: str
    trace: bool = True
    step_by_step: bool = True
    max_steps: Optional[int] = None
    max_stack_depth: Optional[int] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        for name in ("max_steps", "max_stack_depth"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative")


def env_default(name: str, default=None, environ: Optional[Mapping[str, str]] = None):
    """Look up ``LIGHT_EVM_<name>``; unset or empty returns ``default``."""
    environ = os.environ if environ is None else environ
    value = environ.get(ENV_PREFIX + name)
    return value if value else default


def env_int(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    value = env_default(name, environ=environ)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from None
