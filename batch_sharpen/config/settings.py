"""Run configuration loaded from environment variables (.env supported)."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from ..errors import ConfigError

# Load environment variables
load_dotenv()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    input_dir: Path = Path("imagenes")
    output_dir: Path = Path("imagenes/enhanced")
    amount: float = 0.45          # sharpen amount `a`
    min_bytes: int = 150000       # smaller files are copied untouched
    ext: str = ".png"
    continue_on_error: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls().with_overrides(
            input_dir=os.getenv("SHARPEN_INPUT_DIR"),
            output_dir=os.getenv("SHARPEN_OUTPUT_DIR"),
            amount=os.getenv("SHARPEN_AMOUNT"),
            min_bytes=os.getenv("SHARPEN_MIN_BYTES"),
            ext=os.getenv("SHARPEN_INPUT_EXT"),
            continue_on_error=os.getenv("SHARPEN_CONTINUE_ON_ERROR"),
            log_level=os.getenv("SHARPEN_LOG_LEVEL"),
        )

    def with_overrides(self, **values) -> Settings:
        """
        Return a copy with every non-None value parsed and applied.
        Raises ConfigError on the first malformed value.
        """
        parsed = {}
        for name, raw in values.items():
            if raw is None:
                continue
            parser = _PARSERS.get(name)
            if parser is None:
                raise ConfigError(f"Unknown setting: {name}")
            parsed[name] = parser(name, raw)
        return replace(self, **parsed)


def _parse_path(name, raw) -> Path:
    if str(raw).strip() == "":
        raise ConfigError(f"{name} must not be empty")
    return Path(raw)


def _parse_amount(name, raw) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be finite, got {raw!r}")
    return value


def _parse_min_bytes(name, raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer byte count, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def _parse_ext(name, raw) -> str:
    ext = str(raw).strip()
    if not ext or ext == ".":
        raise ConfigError(f"{name} must not be empty")
    return ext if ext.startswith(".") else f".{ext}"


def _parse_bool(name, raw) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_log_level(name, raw) -> str:
    level = str(raw).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{name} is not a logging level: {raw!r}")
    return level


_PARSERS = {
    "input_dir": _parse_path,
    "output_dir": _parse_path,
    "amount": _parse_amount,
    "min_bytes": _parse_min_bytes,
    "ext": _parse_ext,
    "continue_on_error": _parse_bool,
    "log_level": _parse_log_level,
}
