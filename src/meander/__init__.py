"""Synthetic harmonic/meander signal generation and spectrum plotting."""

from .core import (
    BandUnattainableError,
    InvalidParameterError,
    PlotPipeline,
    SpectrumResult,
    analyze,
    build_timeline,
    sine,
    square_from,
)

__all__ = [
    "BandUnattainableError",
    "InvalidParameterError",
    "PlotPipeline",
    "SpectrumResult",
    "analyze",
    "build_timeline",
    "sine",
    "square_from",
]

__version__ = "0.1.0"
