"""Application configuration from environment variables and the tiling YAML."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic_settings import BaseSettings

from polytiles.models.sources import Configuration


class Settings(BaseSettings):
    polytiles_log_level: str = "info"

    # Worker threads per pool; 0 means one per CPU
    polytiles_workers: int = 0

    # Tiling jobs
    polytiles_config: str = "Settings.yaml"

    # Progress bars on stderr
    polytiles_progress: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def workers(self) -> int:
        return self.polytiles_workers or os.cpu_count() or 1


settings = Settings()


def load_configuration(path: str | Path) -> Configuration:
    """Read and validate the tiling jobs file."""
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return Configuration.model_validate(raw)
