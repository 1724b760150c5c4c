from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    """Tuning constants for transition prediction and duration totals."""

    base_transition_seconds: float = Field(ge=0, default=15)
    bpm_difference_penalty_multiplier: float = Field(ge=0, default=0.2)
    key_mismatch_penalty_seconds: float = Field(ge=0, default=10)
    max_transition_seconds: float = Field(gt=0, default=120)
    default_song_duration_seconds: int = Field(gt=0, default=180)
    slot_durations_minutes: list[int] = [45, 60, 90]
    large_bpm_threshold: int = Field(ge=0, default=20)

    @field_validator("slot_durations_minutes")
    @classmethod
    def _positive_slots(cls, value: list[int]) -> list[int]:
        if any(minutes <= 0 for minutes in value):
            raise ValueError("slot durations must be positive")
        return sorted(value)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {value}")
        return name


def load_local_env_file(env_path: str = ".env") -> list[str]:
    """Copy KEY=VALUE lines from a dotenv file into os.environ.

    Variables already set in the process win. Returns the names that were
    added, in file order. A missing file adds nothing.
    """
    path = Path(env_path)
    if not path.is_file():
        return []

    added: list[str] = []
    for line_number, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#"):
            continue
        name, sep, raw_value = line.partition("=")
        name = name.strip()
        if not sep or not name:
            logger.debug(f"[Config] Skipping {path}:{line_number}, not a KEY=VALUE line")
            continue
        if name in os.environ:
            continue
        os.environ[name] = raw_value.strip().strip("\"'")
        added.append(name)
    return added


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_int_list(name: str) -> list[int] | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        return None


def settings_from_env(prefix: str = "SETLIST_", env_path: str | None = None) -> EngineSettings:
    """Build EngineSettings from environment variables named PREFIX + FIELD.

    When env_path is given, that dotenv file is loaded first without
    replacing variables already set. Blank, unparsable or out-of-range values
    fall back to the field default. Intended for host applications; engine
    functions only ever receive settings objects.
    """
    if env_path is not None:
        load_local_env_file(env_path)

    overrides: dict[str, object] = {}
    for name in EngineSettings.model_fields:
        env_name = f"{prefix}{name.upper()}"
        if name == "slot_durations_minutes":
            value = _env_int_list(env_name)
        else:
            value = _env_float(env_name)
        if value is None:
            continue
        try:
            EngineSettings(**{name: value})
        except ValidationError:
            logger.warning(f"[Config] Ignoring {env_name}={os.getenv(env_name)!r}, using default")
            continue
        overrides[name] = value
    return EngineSettings(**overrides)


def setup_logging(config: LoggingSettings) -> None:
    """Setup application logging for a host process.

    Args:
        config: Logging configuration
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    logging.basicConfig(
        level=getattr(logging, config.level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
