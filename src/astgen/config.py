"""Run options and their environment defaults.

Environment variables:
- ASTGEN_MIN_NODES: smallest accepted tree in batch mode (default 20)
- ASTGEN_MAX_NODES: largest accepted tree in batch mode (default 30000)
- ASTGEN_WORKERS: parallel parse workers (default: CPU count)
- ASTGEN_PROGRESS_INTERVAL: files between progress log lines (default 1000)
- ASTGEN_DEBUG: enable debug logging
"""

import os
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from astgen.exceptions import ConfigError

DEFAULT_MIN_NODES = 20
DEFAULT_MAX_NODES = 30000
DEFAULT_PROGRESS_INTERVAL = 1000


def default_workers() -> int:
    return os.cpu_count() or 1


class BatchOptions(BaseModel):
    min_nodes: int = Field(default=DEFAULT_MIN_NODES, ge=0)
    max_nodes: int = Field(default=DEFAULT_MAX_NODES, ge=0)
    method_only: bool = False
    language: str | None = None
    workers: int = Field(default_factory=default_workers, ge=1)
    progress_interval: int = Field(default=DEFAULT_PROGRESS_INTERVAL, ge=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "BatchOptions":
        if self.min_nodes > self.max_nodes:
            raise ValueError(f"min_nodes ({self.min_nodes}) is greater than max_nodes ({self.max_nodes})")
        return self


_ENV_FIELDS = {
    "min_nodes": "ASTGEN_MIN_NODES",
    "max_nodes": "ASTGEN_MAX_NODES",
    "workers": "ASTGEN_WORKERS",
    "progress_interval": "ASTGEN_PROGRESS_INTERVAL",
}


def debug_enabled() -> bool:
    return os.environ.get("ASTGEN_DEBUG", "").lower() in ("true", "1", "yes")


def load_options(**overrides: Any) -> BatchOptions:
    """Build options from the environment, then apply non-None overrides."""
    values: dict[str, Any] = {}
    for field_name, env_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BatchOptions.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(_format_error(err) for err in e.errors())
        raise ConfigError(f"invalid options: {problems}") from None


def _format_error(err: Any) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()))
    env_name = _ENV_FIELDS.get(location)
    label = f"{location} ({env_name})" if env_name else location
    return f"{label}: {err['msg']}" if label else err["msg"]
