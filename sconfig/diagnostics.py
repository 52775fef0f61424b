"""
Verbosity handle shared by the stores.

A Diagnostics value is read once (from AppConfig or from the host's own
properties file) and handed to every store at construction, so no store
polls a global flag per operation.
"""

import logging
from dataclasses import dataclass

from sconfig.config import AppConfig


@dataclass(frozen=True)
class Diagnostics:
    """Immutable verbosity setting for store diagnostics."""
    verbose: bool = False

    @classmethod
    def from_config(cls, config: AppConfig) -> "Diagnostics":
        return cls(verbose=config.debug)

    def success(self, logger: logging.Logger, msg: str, *args) -> None:
        """Routine lifecycle message (file created, file parsed)."""
        if self.verbose:
            logger.info(msg, *args)

    def warning(self, logger: logging.Logger, msg: str, *args) -> None:
        """Recovered failure, only reported in verbose mode."""
        if self.verbose:
            logger.warning(msg, *args)

    def error(self, logger: logging.Logger, msg: str, *args) -> None:
        """Failure that left state inconsistent; always reported."""
        logger.error(msg, *args)


QUIET = Diagnostics(verbose=False)
