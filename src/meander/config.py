from __future__ import annotations

"""Configuration utilities for meander.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the signal sweep parameters, the
per-signal spectrum band ceilings, analysis policy, rendering and output
options.  Instances can be populated from environment variables or from
YAML/JSON files with matching nested keys.
"""

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


BAND_POLICIES = ("raise", "skip", "clamp")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_floats(value: str) -> list[float]:
    return [float(item) for item in value.split(",") if item.strip()]


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class SignalSettings(SectionModel):
    """Sampling parameters and the frequency sweep."""

    sample_rate: int = 500
    base_duration: float = 16.0
    test_freqs: list[float] = Field(default_factory=lambda: [1.0, 2.0, 4.0, 8.0])

    @field_validator("sample_rate")
    @classmethod
    def _positive_rate(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("sample_rate must be positive")
        return value

    @field_validator("base_duration")
    @classmethod
    def _positive_duration(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("base_duration must be positive")
        return value

    @field_validator("test_freqs", mode="before")
    @classmethod
    def _coerce_float_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_floats(value)
        if isinstance(value, (int, float)):
            return [float(value)]
        if isinstance(value, (list, tuple)):
            return [float(item) for item in value]
        return value


class BandSettings(SectionModel):
    """Spectrum band ceilings (Hz) per signal type."""

    harmonic: float = 15.0
    square: float = 120.0


class AnalysisSettings(SectionModel):
    """Spectrum analysis options."""

    band_policy: Literal["raise", "skip", "clamp"] = "skip"
    top_bins: int = 5


class RenderSettings(SectionModel):
    """Options for the matplotlib SVG renderer."""

    style: str = "dark_background"
    tick_lines: bool = True
    figsize: tuple[float, float] = (8.0, 5.0)
    line_width: float = 1.0
    dpi: int = 100


class OutputSettings(SectionModel):
    """Where and what to write."""

    root: str = "out"
    save_data: bool = False


class LoggingSettings(SectionModel):
    """Log verbosity for the ``meander`` logger."""

    level: str = "INFO"


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    signal: SignalSettings = Field(default_factory=SignalSettings)
    bands: BandSettings = Field(default_factory=BandSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="MEANDER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        class LegacyEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LegacyEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required to load YAML files")
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
