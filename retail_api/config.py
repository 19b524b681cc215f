from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    host: str = "0.0.0.0"
    port: int = 3000
    data_file: Path = Path("data/products.json")
    images_dir: Path = Path("data/images")
    server_name: str = "Retail Dashboard API"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields from .env file


def load_yaml_overrides(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping of setting overrides.

    Returns an empty dict when the file does not exist.
    """

    cfg_path = Path(path)
    if not cfg_path.exists():
        return {}

    with cfg_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{cfg_path} must contain a mapping of settings.")

    return data


def load_settings(config_path: str | Path = "config/server.yaml", **overrides: Any) -> Settings:
    """Build settings from env, then the YAML file, then explicit overrides."""

    data = load_yaml_overrides(config_path)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
