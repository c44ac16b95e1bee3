from __future__ import annotations

"""Per-frequency plot pipeline.

For each test frequency a timeline spanning ``base_duration / freq`` seconds
is built, so every chart covers the same number of wave cycles.  The
harmonic and its meander are synthesised over it, both spectra are computed
with their own band ceiling, and the four resulting :class:`PlotBundle`
objects are rendered and written out.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from ..config import BAND_POLICIES, Settings
from ..export.artifacts import artifact_name, frequency_dir, freq_suffix, write_artifacts
from ..export.to_numpy import bundles_to_npz
from ..types import (
    HARMONIC,
    HARMONIC_SPECTRUM,
    MEANDER,
    MEANDER_SPECTRUM,
    PlotBundle,
)
from ..viz.render import MatplotlibSvgRenderer, Renderer, RenderError
from .spectrum import BandUnattainableError, SpectrumResult, Transform, TransformError, analyze
from .synth import sine, square_from
from .timeline import InvalidParameterError, build_timeline

logger = logging.getLogger(__name__)

TIME_LABEL = "time"
FREQUENCY_LABEL = "frequency"
AMPLITUDE_LABEL = "amplitude"


def duration_for(freq: float, base_duration: float) -> float:
    """Signal span for ``freq`` so that each chart shows the same cycle count."""

    freq = float(freq)
    if not freq > 0:
        raise InvalidParameterError(f"test frequency must be positive, got {freq}")
    return base_duration / freq


def _check_policy(policy: str) -> str:
    if policy not in BAND_POLICIES:
        raise ValueError(f"band_policy must be one of {BAND_POLICIES}, got {policy!r}")
    return policy


def build_bundles(
    freq: float,
    settings: Settings | None = None,
    *,
    transform: Transform | None = None,
    band_policy: str | None = None,
) -> List[PlotBundle]:
    """Return the four chart bundles for ``freq``.

    The order is harmonic, meander, harmonic spectrum, meander spectrum.
    With ``band_policy="clamp"`` an unreachable band ceiling keeps the full
    spectrum; any other policy lets :class:`BandUnattainableError` propagate
    with ``freq`` attached.
    """

    if settings is None:
        settings = Settings()
    policy = _check_policy(band_policy or settings.analysis.band_policy)
    sig = settings.signal

    timeline = build_timeline(sig.sample_rate, duration_for(freq, sig.base_duration))
    harmonic = sine(freq, timeline)
    meander = square_from(harmonic)

    clamp = policy == "clamp"

    def spectrum_of(kind: str, values, band: float) -> SpectrumResult:
        try:
            return analyze(values, sig.sample_rate, band, transform=transform, clamp=clamp)
        except BandUnattainableError as exc:
            exc.with_freq(freq)
            raise
        except TransformError as exc:
            exc.with_context(kind=kind, freq=freq)
            raise

    harmonic_spec = spectrum_of(HARMONIC_SPECTRUM, harmonic, settings.bands.harmonic)
    meander_spec = spectrum_of(MEANDER_SPECTRUM, meander, settings.bands.square)

    return [
        PlotBundle(HARMONIC, harmonic, timeline, "harmonic signal", TIME_LABEL, AMPLITUDE_LABEL),
        PlotBundle(MEANDER, meander, timeline, "meander signal", TIME_LABEL, AMPLITUDE_LABEL),
        PlotBundle(
            HARMONIC_SPECTRUM,
            harmonic_spec.magnitudes,
            harmonic_spec.frequencies,
            "spectrum of harmonic signal",
            FREQUENCY_LABEL,
            AMPLITUDE_LABEL,
        ),
        PlotBundle(
            MEANDER_SPECTRUM,
            meander_spec.magnitudes,
            meander_spec.frequencies,
            "spectrum of meander signal",
            FREQUENCY_LABEL,
            AMPLITUDE_LABEL,
        ),
    ]


@dataclass
class SweepReport:
    """Outcome of :meth:`PlotPipeline.run`.

    Attributes
    ----------
    written:
        Mapping of frequency to the files produced for it.
    skipped:
        Mapping of frequency to the reason its chart set was dropped.
    """

    written: Dict[float, List[Path]] = field(default_factory=dict)
    skipped: Dict[float, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.skipped


class PlotPipeline:
    """Render the harmonic/meander chart set for a sweep of frequencies."""

    def __init__(
        self,
        settings: Settings | None = None,
        renderer: Renderer | None = None,
        transform: Transform | None = None,
    ) -> None:
        self.settings = settings or Settings()
        if renderer is None:
            renderer = MatplotlibSvgRenderer(self.settings.render)
        self.renderer = renderer
        self.transform = transform

    def bundles(self, freq: float) -> List[PlotBundle]:
        return build_bundles(freq, self.settings, transform=self.transform)

    def render_bundles(self, freq: float, bundles: Sequence[PlotBundle]) -> Dict[str, str]:
        """Render ``bundles`` into a ``kind -> SVG`` mapping."""

        charts: Dict[str, str] = {}
        for bundle in bundles:
            try:
                svg = self.renderer.render(
                    bundle.x, bundle.y, bundle.title, bundle.x_label, bundle.y_label
                )
            except RenderError as exc:
                if exc.kind is not None:
                    raise
                raise RenderError(str(exc), kind=bundle.kind, freq=freq) from exc
            except Exception as exc:
                raise RenderError(
                    f"renderer failed: {exc}", kind=bundle.kind, freq=freq
                ) from exc
            charts[bundle.kind] = svg
        return charts

    def render(self, freq: float) -> Dict[str, str]:
        """Return the rendered charts of ``freq`` keyed by artifact file name."""

        charts = self.render_bundles(freq, self.bundles(freq))
        return {artifact_name(kind, freq): svg for kind, svg in charts.items()}

    def run(
        self,
        freqs: Iterable[float] | None = None,
        output: str | Path | None = None,
    ) -> SweepReport:
        """Render and write the chart set of every frequency.

        ``freqs`` defaults to ``settings.signal.test_freqs`` and ``output`` to
        ``settings.output.root``.  A frequency whose band ceiling is out of
        reach is skipped under the ``skip`` policy; every other failure
        propagates.
        """

        source = self.settings.signal.test_freqs if freqs is None else freqs
        # repeated frequencies are rendered once, first occurrence wins
        freqs = list(dict.fromkeys(float(f) for f in source))
        root = Path(output if output is not None else self.settings.output.root)
        policy = _check_policy(self.settings.analysis.band_policy)
        report = SweepReport()

        for freq in freqs:
            try:
                bundles = self.bundles(freq)
            except BandUnattainableError as exc:
                if policy != "skip":
                    raise
                logger.error("skipping %s Hz: %s", freq_suffix(freq), exc)
                report.skipped[float(freq)] = str(exc)
                continue

            charts = self.render_bundles(freq, bundles)
            paths = write_artifacts(root, freq, charts)
            if self.settings.output.save_data:
                npz = frequency_dir(root, freq) / f"series-freq{freq_suffix(freq)}.npz"
                paths.append(bundles_to_npz(bundles, npz))
            report.written[float(freq)] = paths
            logger.info("wrote %d files for %s Hz to %s", len(paths), freq_suffix(freq), root)

        return report
