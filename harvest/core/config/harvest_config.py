"""
Acquisition Pipeline Configuration.

Declarative schema for where datasets are cached, how bytes are streamed,
and how verbose the pipeline is. Frozen after creation.

Attributes:
    cache_root: Validated path under which dataset families are cached (default: ./data).
    chunk_size: Streaming chunk size in bytes for transfers and checksums.
    request_timeout: Per-request timeout in seconds, or None to wait indefinitely.
    log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_dir: Optional directory for rotating log files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..io import load_config_from_yaml
from ..logger import Logger
from ..paths import DEFAULT_CACHE_ROOT, DEFAULT_CHUNK_SIZE, LOGGER_NAME
from .types import LogLevel, PositiveFloat, PositiveInt, ValidatedPath


class HarvestConfig(BaseModel):
    """
    Declarative manifest for cache location, transfer and logging policy.

    Example:
        >>> cfg = HarvestConfig.from_yaml(Path("harvest.yaml"))
        >>> cfg.cache_root
        PosixPath('/home/user/project/data')
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    # Filesystem
    cache_root: ValidatedPath = Field(default=DEFAULT_CACHE_ROOT)  # type: ignore[assignment]

    # Transfer
    chunk_size: PositiveInt = Field(
        default=DEFAULT_CHUNK_SIZE, description="Streaming chunk size (bytes)"
    )
    request_timeout: PositiveFloat | None = Field(
        default=None, description="Seconds before a stalled request fails; None waits forever"
    )

    # Telemetry
    log_level: LogLevel = Field(default="INFO")
    log_dir: ValidatedPath | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """
        Handle an empty YAML section by returning a default dict.

        When YAML contains 'harvest:' with no values, Pydantic receives None.
        """
        if data is None:
            return {}
        return data

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "HarvestConfig":
        """
        Builds a configuration from a YAML manifest.

        Accepts either a flat mapping of fields or a mapping nested under a
        top-level ``harvest`` key.

        Args:
            yaml_path: Path to the YAML file.

        Returns:
            Validated, frozen configuration.
        """
        raw = load_config_from_yaml(Path(yaml_path))
        if "harvest" in raw:
            raw = raw["harvest"]
        return cls.model_validate(raw)

    def configure_logging(self) -> logging.Logger:
        """Applies ``log_level`` and ``log_dir`` to the shared pipeline logger."""
        return Logger.setup(name=LOGGER_NAME, log_dir=self.log_dir, level=self.log_level)
