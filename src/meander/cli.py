from __future__ import annotations

"""Command line interface for meander using Typer."""

from pathlib import Path
from typing import Dict, List, Optional

import json
import logging

import typer
from pydantic import ValidationError

from ._typer import check_choice, check_frequencies, fail
from .config import BAND_POLICIES, Settings, load_settings
from .core import (
    BandUnattainableError,
    InvalidParameterError,
    PlotPipeline,
    TransformError,
    analyze,
    build_timeline,
    dominant_bins,
    duration_for,
    sine,
    square_from,
)
from .export.artifacts import OutputError
from .utils.logging import get_logger
from .viz.render import RenderError

app = typer.Typer(help="Harmonic and meander signal spectra")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys[:-1]:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)
    if not hasattr(current, keys[-1]):
        raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. signal.sample_rate=1000",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (RuntimeError, TypeError, ValidationError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            value = _parse_override_value(raw_value)
            _apply_override(data, keys, value)
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    get_logger("meander", level="DEBUG" if verbose else settings.logging.level)
    ctx.obj = settings


@app.command()
def sweep(
    ctx: typer.Context,
    freq: Optional[List[float]] = typer.Option(
        None, "--freq", "-f", help="Test frequency in Hz; repeat for several"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", file_okay=False),
    policy: Optional[str] = typer.Option(
        None, "--policy", help="Unreachable band handling: raise, skip or clamp"
    ),
    save_data: Optional[bool] = typer.Option(None, "--save-data/--no-save-data"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on failure"),
) -> None:
    """Render the harmonic and meander charts for every test frequency.

    One directory ``freq<N>`` is created per frequency under the output root,
    holding the time-domain and spectrum charts of both signals as SVG.
    """

    cfg: Settings = ctx.obj
    if check_choice(policy, BAND_POLICIES, "--policy") is not None:
        cfg.analysis.band_policy = policy
    if save_data is not None:
        cfg.output.save_data = save_data
    freqs = check_frequencies(list(freq or cfg.signal.test_freqs), "--freq")

    pipeline = PlotPipeline(cfg)
    try:
        report = pipeline.run(freqs, output)
    except (
        BandUnattainableError,
        InvalidParameterError,
        TransformError,
        RenderError,
        OutputError,
    ) as exc:
        if debug:
            logger.exception("sweep failed")
            raise
        fail(f"sweep failed: {exc}")

    for value, paths in report.written.items():
        typer.echo(f"{value:g} Hz: {len(paths)} files")
    for value, reason in report.skipped.items():
        typer.secho(f"{value:g} Hz skipped: {reason}", err=True)
    if not report.ok:
        raise typer.Exit(code=2)


@app.command()
def spectrum(
    ctx: typer.Context,
    freq: float = typer.Argument(..., help="Test frequency in Hz"),
    signal: str = typer.Option("harmonic", "--signal", "-s", help="harmonic or meander"),
    top: Optional[int] = typer.Option(None, "--top", "-n", min=1),
) -> None:
    """Print the strongest spectrum bins of one signal.

    The band ceiling is taken from ``bands.harmonic`` or ``bands.square``
    depending on ``--signal``.
    """

    cfg: Settings = ctx.obj
    check_choice(signal, ("harmonic", "meander"), "--signal")
    check_frequencies([freq], "FREQ")
    count = top or cfg.analysis.top_bins

    rate = cfg.signal.sample_rate
    timeline = build_timeline(rate, duration_for(freq, cfg.signal.base_duration))
    values = sine(freq, timeline)
    band = cfg.bands.harmonic
    if signal == "meander":
        values = square_from(values)
        band = cfg.bands.square

    try:
        result = analyze(values, rate, band, clamp=cfg.analysis.band_policy == "clamp")
    except BandUnattainableError as exc:
        fail(str(exc.with_freq(freq)))

    typer.echo(
        f"{signal} {freq:g} Hz: {timeline.size} samples, {len(result)} bins below {band:g} Hz"
        + (" (clamped)" if result.clamped else "")
    )
    for f, mag in dominant_bins(result, count):
        typer.echo(f"{f:10.4f} Hz  {mag:12.4f}")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Print the effective configuration as JSON."""

    cfg: Settings = ctx.obj
    typer.echo(json.dumps(cfg.model_dump(), indent=2))


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
