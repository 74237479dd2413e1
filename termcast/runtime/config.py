# termcast/runtime/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import math
from dataclasses import dataclass
from typing import Optional

from termcast.runtime.pending import DEFAULT_MAX_TIMEOUT


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Settings for a TypingEnvironment.

    :param install_builtins: Register the built-in Python types and casts on construction.
    :param default_timeout: Await budget for Blocking Terms made by the environment.
    :param max_timeout: Upper bound on any await of such Terms. Always finite.
    :param root_name: Name of the root Type.
    :param log_events: Attach a LoggingHook to the environment.
    :param logger_name: Logger used by that LoggingHook.
    """

    install_builtins: bool = False
    log_events: bool = False
    default_timeout: Optional[float] = None
    max_timeout: float = DEFAULT_MAX_TIMEOUT
    root_name: str = "root"
    logger_name: str = "termcast.environment"

    def __post_init__(self) -> None:
        if self.default_timeout is not None and self.default_timeout < 0:
            raise ValueError("default_timeout must be non-negative")
        if self.max_timeout is None or not math.isfinite(self.max_timeout) or self.max_timeout < 0:
            raise ValueError("max_timeout must be a finite non-negative number")
        if not self.root_name or "." in self.root_name:
            raise ValueError("root_name must be a non-empty name without '.'")
        if not self.logger_name:
            raise ValueError("logger_name must be non-empty")
