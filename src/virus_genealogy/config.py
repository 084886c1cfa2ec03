"""Genealogy configuration.

Resolution order for each setting:
1. Explicit value (constructor or ``from_dict``)
2. Environment variable (``from_env``), e.g. VIRUS_GENEALOGY_VERBOSITY
3. Code default
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

ENV_VERBOSITY = "VIRUS_GENEALOGY_VERBOSITY"
ENV_LOG_DIR = "VIRUS_GENEALOGY_LOG_DIR"
ENV_CHECK_INVARIANTS = "VIRUS_GENEALOGY_CHECK_INVARIANTS"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class GenealogyConfig:
    """Configuration for a VirusGenealogy and its logging.

    A VirusGenealogy reads only ``check_invariants``. The logging fields take
    effect when configure_logging() is called; the package never configures
    logging on its own.

    Attributes:
        verbosity: Console log level: 0=WARNING, 1=INFO, 2+=DEBUG.
        log_to_file: Write JSONL debug logs to ``log_dir``.
        log_dir: Directory for file logging.
        check_invariants: Run consistency checks after every successful
            mutation and log any violation as a warning.
    """

    verbosity: int = 0
    log_to_file: bool = False
    log_dir: Path | None = None
    check_invariants: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenealogyConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary with any of verbosity, log_to_file, log_dir,
                check_invariants.

        Returns:
            GenealogyConfig instance.
        """
        log_dir = data.get("log_dir")
        return cls(
            verbosity=int(data.get("verbosity", 0)),
            log_to_file=bool(data.get("log_to_file", False)),
            log_dir=Path(log_dir) if log_dir else None,
            check_invariants=bool(data.get("check_invariants", False)),
        )

    @classmethod
    def from_env(cls) -> GenealogyConfig:
        """Create config from VIRUS_GENEALOGY_* environment variables.

        Setting VIRUS_GENEALOGY_LOG_DIR enables file logging.

        Raises:
            ValueError: If VIRUS_GENEALOGY_VERBOSITY is not an integer.
        """
        verbosity = os.getenv(ENV_VERBOSITY)
        log_dir = os.getenv(ENV_LOG_DIR)
        check = os.getenv(ENV_CHECK_INVARIANTS, "")
        return cls(
            verbosity=int(verbosity) if verbosity else 0,
            log_to_file=bool(log_dir),
            log_dir=Path(log_dir) if log_dir else None,
            check_invariants=check.strip().lower() in _TRUTHY,
        )

    def configure_logging(self) -> None:
        """Apply the logging settings of this config."""
        from virus_genealogy.observability.logging import configure_logging

        configure_logging(
            verbosity=self.verbosity,
            log_to_file=self.log_to_file,
            log_dir=self.log_dir,
        )
