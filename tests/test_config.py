"""Tests for environment configuration."""

from cupping_compass.config import AppConfig

ENV_VARS = (
    "CUPPING_COMPASS_LANGUAGE",
    "CUPPING_COMPASS_THEME",
    "CUPPING_COMPASS_PROVIDER",
    "CUPPING_COMPASS_MODEL",
    "GEMINI_API_KEY",
    "DATABASE_URL",
    "FRONTEND_ORIGINS",
    "RADAR_SIZE_PX",
    "RADAR_SWEETNESS_AXIS",
)


def test_config_defaults(monkeypatch):
    """Without env vars the defaults should apply."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    config = AppConfig.from_env()

    assert config == AppConfig()
    assert config.allow_origins == ["*"]


def test_config_reads_env(monkeypatch):
    """Env vars should override the defaults."""
    monkeypatch.setenv("CUPPING_COMPASS_LANGUAGE", " EN ")
    monkeypatch.setenv("CUPPING_COMPASS_THEME", "dark")
    monkeypatch.setenv("CUPPING_COMPASS_PROVIDER", "Template")
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/cupping")
    monkeypatch.setenv("FRONTEND_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("RADAR_SIZE_PX", "480")
    monkeypatch.setenv("RADAR_SWEETNESS_AXIS", "off")

    config = AppConfig.from_env()

    assert config.language == "en"
    assert config.theme == "dark"
    assert config.narrative_provider == "template"
    assert config.database_url == "postgresql://localhost/cupping"
    assert config.allow_origins == ["https://a.example", "https://b.example"]
    assert config.radar_size == 480
    assert config.include_sweetness_axis is False


def test_config_ignores_bad_radar_size(monkeypatch):
    monkeypatch.setenv("RADAR_SIZE_PX", "large")
    assert AppConfig.from_env().radar_size == 600
