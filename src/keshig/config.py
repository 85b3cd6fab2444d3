from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from keshig.errors import ConfigError
from keshig.repository import RepositoryLayout

logger = logging.getLogger(__name__)

DEFAULT_PRIVILEGED_MOVE = ("sudo", "mv")
DEFAULT_LARGE_FILE_THRESHOLD = 1024 * 1024


class KeshigConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str | None = None
    privileged_move: list[str] = Field(default_factory=lambda: list(DEFAULT_PRIVILEGED_MOVE))
    large_file_threshold: int = Field(default=DEFAULT_LARGE_FILE_THRESHOLD, ge=1)
    status_timeout_seconds: float | None = Field(default=60.0, gt=0.0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            raise ValueError("url must not be empty")
        return normalized

    @field_validator("privileged_move")
    @classmethod
    def validate_privileged_move(cls, value: list[str]) -> list[str]:
        normalized = [part.strip() for part in value if part.strip()]
        if not normalized:
            raise ValueError("privileged_move must name a command")
        return normalized


def load_config(path: str | Path) -> KeshigConfig:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc

    payload = _parse_yaml(raw)
    try:
        return KeshigConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def load_config_or_default(path: str | Path) -> KeshigConfig:
    if not Path(path).exists():
        return KeshigConfig()
    return load_config(path)


def save_config(config: KeshigConfig, path: str | Path) -> None:
    payload = config.model_dump(mode="json")
    Path(path).write_text(
        yaml.safe_dump(payload, sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )


def init_repository(layout: RepositoryLayout, url: str) -> KeshigConfig:
    if layout.config_file.exists():
        raise ConfigError("This repo already has keshig configuration")

    try:
        config = KeshigConfig(url=url)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    save_config(config, layout.config_file)
    layout.cache_dir.mkdir(parents=True, exist_ok=True)
    logger.info("keshig initialized root=%s url=%s", layout.root, config.url)
    return config


def _parse_yaml(raw: str) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration is not valid YAML: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigError("Configuration root must be a mapping.")
    return parsed
