"""Runtime settings read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class AppConfig:
    language: str = "es"
    theme: str = "light"
    narrative_provider: str = "gemini"
    narrative_model: str = "gemini-2.0-flash"
    gemini_api_key: str | None = None
    database_url: str | None = None
    allow_origins: list[str] = field(default_factory=lambda: ["*"])
    radar_size: int = 600
    include_sweetness_axis: bool = True

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            language=os.getenv("CUPPING_COMPASS_LANGUAGE", "es").strip().lower() or "es",
            theme=os.getenv("CUPPING_COMPASS_THEME", "light").strip().lower() or "light",
            narrative_provider=os.getenv("CUPPING_COMPASS_PROVIDER", "gemini").strip().lower() or "gemini",
            narrative_model=os.getenv("CUPPING_COMPASS_MODEL", "gemini-2.0-flash"),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            database_url=os.getenv("DATABASE_URL"),
            allow_origins=_split_csv(os.getenv("FRONTEND_ORIGINS", "*")),
            radar_size=int(_safe_float(os.getenv("RADAR_SIZE_PX"), 600)),
            include_sweetness_axis=_parse_bool(os.getenv("RADAR_SWEETNESS_AXIS"), True),
        )
