from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

GOOGLE_MAPS_API_KEY_ENV = "GOOGLE_MAPS_API_KEY"
DEFAULT_CATEGORIES: tuple[str, ...] = ("hospital", "doctor")

_POSITIVE_INT_VARS = (
    "PLACES_SEARCH_RADIUS_M",
    "PLACES_DETAILS_CAP",
    "PLACES_DETAILS_CONCURRENCY",
)
_POSITIVE_FLOAT_VARS = (
    "PLACES_HTTP_TIMEOUT_SECONDS",
    "WALKING_METERS_PER_MINUTE",
)


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def _as_bool(name: str, default: bool = False) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    for var_name in _POSITIVE_INT_VARS:
        raw = _env(var_name)
        if raw is None:
            continue
        try:
            if int(raw) <= 0:
                raise ValueError("must be positive")
        except ValueError:
            invalid_values.append(f"{var_name} must be a positive integer")

    for var_name in _POSITIVE_FLOAT_VARS:
        raw = _env(var_name)
        if raw is None:
            continue
        try:
            if float(raw) <= 0:
                raise ValueError("must be positive")
        except ValueError:
            invalid_values.append(f"{var_name} must be a positive number")

    categories = _env("PLACES_CATEGORIES")
    if categories is not None and not _split_csv(categories):
        invalid_values.append("PLACES_CATEGORIES must list at least one place type")

    return invalid_values


def validate_environment() -> None:
    invalid_values = collect_invalid_env_values()
    if not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    message_lines.append("")
    message_lines.append("Invalid environment values:")
    message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    google_maps_api_key: str | None
    places_language: str
    places_categories: tuple[str, ...]
    places_search_radius_m: int
    places_details_cap: int
    places_details_concurrency: int
    places_http_timeout_seconds: float
    walking_meters_per_minute: float
    debug_include_error_details: bool
    log_level: str
    log_json: bool

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    validate_environment()

    return Settings(
        env=_env("ENV") or "development",
        # Missing is reported per request, not at startup.
        google_maps_api_key=_env(GOOGLE_MAPS_API_KEY_ENV),
        places_language=_env("PLACES_LANGUAGE") or "ja",
        places_categories=_split_csv(_env("PLACES_CATEGORIES")) or DEFAULT_CATEGORIES,
        places_search_radius_m=int(_env("PLACES_SEARCH_RADIUS_M") or 1600),
        places_details_cap=int(_env("PLACES_DETAILS_CAP") or 20),
        places_details_concurrency=int(_env("PLACES_DETAILS_CONCURRENCY") or 5),
        places_http_timeout_seconds=float(_env("PLACES_HTTP_TIMEOUT_SECONDS") or 10.0),
        walking_meters_per_minute=float(_env("WALKING_METERS_PER_MINUTE") or 80.0),
        debug_include_error_details=_as_bool("DEBUG_INCLUDE_ERROR_DETAILS"),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        log_json=_as_bool("LOG_JSON", default=True),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
