"""Core algorithms and data structures for meander."""

from .timeline import InvalidParameterError, build_timeline, sample_count
from .synth import sine, square_from
from .spectrum import (
    BandUnattainableError,
    SpectrumResult,
    TransformError,
    analyze,
    dominant_bins,
    find_band_end,
    frequency_axis,
    magnitude_spectrum,
)
from .pipeline import PlotPipeline, SweepReport, build_bundles, duration_for

__all__ = [
    "InvalidParameterError",
    "build_timeline",
    "sample_count",
    "sine",
    "square_from",
    "BandUnattainableError",
    "SpectrumResult",
    "TransformError",
    "analyze",
    "dominant_bins",
    "find_band_end",
    "frequency_axis",
    "magnitude_spectrum",
    "PlotPipeline",
    "SweepReport",
    "build_bundles",
    "duration_for",
]
