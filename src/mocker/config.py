"""
Run configuration for the record mocker.

Defaults can be overridden through environment variables (optionally from a
.env file); command-line options override both.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("avro", "parquet", "csv")


@dataclass
class MockerConfig:
    """Configuration for a generation run."""
    flush_interval: int = 1000
    """Records buffered by the writer between flushes."""

    output_format: str = "avro"
    """'avro' (the default), 'parquet' or 'csv'."""

    random_seed: Optional[int] = None
    """Seed for the random source. If None, seeded from the clock."""

    show_progress: bool = True
    """Whether to show a progress bar while writing."""

    def __post_init__(self):
        if self.flush_interval <= 0:
            raise ValueError("flush_interval must be positive")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format: {self.output_format}. Available: {', '.join(OUTPUT_FORMATS)}"
            )

    @classmethod
    def from_env(cls) -> "MockerConfig":
        """
        Build a config from MOCKER_FLUSH_INTERVAL, MOCKER_OUTPUT_FORMAT and
        MOCKER_SEED, loading a .env file first if present.
        """
        load_dotenv()

        flush_interval = os.getenv("MOCKER_FLUSH_INTERVAL")
        seed = os.getenv("MOCKER_SEED")
        config = cls(
            flush_interval=int(flush_interval) if flush_interval else cls.flush_interval,
            output_format=os.getenv("MOCKER_OUTPUT_FORMAT") or cls.output_format,
            random_seed=int(seed) if seed else None,
        )
        logger.debug("Loaded config from environment: %s", config)
        return config
