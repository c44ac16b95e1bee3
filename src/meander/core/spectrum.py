from __future__ import annotations

"""Amplitude spectra with a band-limited frequency axis.

The discrete Fourier transform itself is delegated to a *transform*
callable, ``samples -> complex sequence``, returning the standard forward
ordering (DC first, ascending non-negative frequencies, then the mirrored
negative half).  :func:`scipy.fft.fft` is used when none is supplied.

Only the first ``N // 2`` outputs are kept.  Bin ``i`` of the matching
frequency axis is ``i * sample_rate / N``; the spectrum is then cut at the
first bin reaching the requested band ceiling, that bin excluded.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from scipy import fft as sp_fft

from ..types import frozen_array
from .timeline import validate_sample_rate

Transform = Callable[[np.ndarray], np.ndarray]

logger = logging.getLogger(__name__)


class BandUnattainableError(ValueError):
    """Raised when no frequency bin reaches the requested band ceiling.

    Attributes
    ----------
    max_freq:
        The requested ceiling in Hz.
    available:
        Highest bin on the axis, or ``None`` when the axis is empty.
    sample_rate:
        Sample rate of the analysed signal.
    freq:
        Test frequency being processed, filled in by the pipeline.
    """

    def __init__(
        self,
        max_freq: float,
        *,
        available: float | None,
        sample_rate: int,
        freq: float | None = None,
    ) -> None:
        self.max_freq = float(max_freq)
        self.available = available
        self.sample_rate = sample_rate
        self.freq = freq
        super().__init__(self._message())

    def _message(self) -> str:
        top = "no bins" if self.available is None else f"highest bin {self.available:g} Hz"
        where = "" if self.freq is None else f" for {self.freq:g} Hz signal"
        return (
            f"band ceiling {self.max_freq:g} Hz unattainable{where} "
            f"(sample_rate={self.sample_rate}, {top})"
        )

    def with_freq(self, freq: float) -> "BandUnattainableError":
        """Attach the test frequency and refresh the message."""

        self.freq = float(freq)
        self.args = (self._message(),)
        return self


class TransformError(RuntimeError):
    """Raised when the Fourier transform fails or returns a malformed result.

    ``kind`` and ``freq`` identify the spectrum being computed once the
    pipeline attaches them with :meth:`with_context`.
    """

    def __init__(self, message: str, *, kind: str | None = None, freq: float | None = None):
        self.detail = message
        self.kind = kind
        self.freq = freq
        super().__init__(self._message())

    def _message(self) -> str:
        context = []
        if self.kind is not None:
            context.append(self.kind)
        if self.freq is not None:
            context.append(f"{self.freq:g} Hz")
        prefix = f"[{', '.join(context)}] " if context else ""
        return f"{prefix}{self.detail}"

    def with_context(self, *, kind: str, freq: float) -> "TransformError":
        """Attach the spectrum kind and test frequency and refresh the message."""

        self.kind = kind
        self.freq = float(freq)
        self.args = (self._message(),)
        return self


@dataclass(frozen=True)
class SpectrumResult:
    """Truncated magnitude spectrum and its frequency axis.

    ``magnitudes[i]`` is the amplitude at ``frequencies[i]`` Hz.  ``clamped``
    is set when the band ceiling could not be reached and the whole
    non-negative half was kept instead.
    """

    magnitudes: np.ndarray
    frequencies: np.ndarray
    max_freq: float
    clamped: bool = False

    def __post_init__(self) -> None:
        mags = frozen_array(self.magnitudes, dtype=float)
        freqs = frozen_array(self.frequencies, dtype=float)
        if mags.shape != freqs.shape:
            raise ValueError("magnitudes and frequencies must have the same length")
        object.__setattr__(self, "magnitudes", mags)
        object.__setattr__(self, "frequencies", freqs)

    def __len__(self) -> int:
        return int(self.magnitudes.size)


def scipy_transform(samples: np.ndarray) -> np.ndarray:
    """Forward FFT via :func:`scipy.fft.fft`."""

    return sp_fft.fft(samples)


def frequency_axis(n: int, sample_rate: int) -> np.ndarray:
    """Return the non-negative frequency bins for an ``n``-sample signal.

    The axis has ``n // 2`` entries, ``i * sample_rate / n``.
    """

    if n < 0:
        raise ValueError("n must not be negative")
    sample_rate = validate_sample_rate(sample_rate)
    if n == 0:
        return np.empty(0)
    # multiply before dividing, matching i * sample_rate / n bit for bit
    return np.arange(n // 2, dtype=float) * float(sample_rate) / float(n)


def magnitude_spectrum(
    signal: Sequence[float] | np.ndarray,
    transform: Transform | None = None,
) -> np.ndarray:
    """Return ``|X[i]|`` for the first ``N // 2`` transform outputs.

    The transform receives the samples as a complex array with zero
    imaginary part.  An empty signal yields an empty spectrum without
    calling the transform.
    """

    transform = transform or scipy_transform
    samples = np.asarray(signal, dtype=float).reshape(-1)
    n = samples.size
    if n == 0:
        return np.empty(0)
    try:
        out = np.asarray(transform(samples.astype(complex)))
    except Exception as exc:
        raise TransformError(f"transform failed on {n} samples: {exc}") from exc
    if out.shape != (n,):
        raise TransformError(
            f"transform returned shape {out.shape} for {n} samples"
        )
    return np.abs(out[: n // 2])


def find_band_end(axis: Sequence[float] | np.ndarray, max_freq: float) -> int | None:
    """Return the first index ``j`` with ``axis[j] >= max_freq``.

    ``None`` is returned when no bin reaches ``max_freq``.
    """

    arr = np.asarray(axis, dtype=float)
    hits = np.flatnonzero(arr >= max_freq)
    if hits.size == 0:
        return None
    return int(hits[0])


def analyze(
    signal: Sequence[float] | np.ndarray,
    sample_rate: int,
    max_freq: float,
    *,
    transform: Transform | None = None,
    clamp: bool = False,
) -> SpectrumResult:
    """Compute the amplitude spectrum of ``signal`` up to ``max_freq``.

    Parameters
    ----------
    signal:
        Real-valued samples.
    sample_rate:
        Sampling rate in Hz used to label the bins.
    max_freq:
        Band ceiling.  Bins from the first one ``>= max_freq`` onwards are
        dropped.
    transform:
        Optional FFT callable; defaults to :func:`scipy_transform`.
    clamp:
        When the ceiling is beyond the last bin, keep the full axis and mark
        the result as ``clamped`` instead of raising.

    Raises
    ------
    InvalidParameterError
        If ``sample_rate`` is not a positive integer.
    BandUnattainableError
        If no bin reaches ``max_freq`` and ``clamp`` is false.
    TransformError
        If the transform fails.
    """

    sample_rate = validate_sample_rate(sample_rate)
    samples = np.asarray(signal, dtype=float).reshape(-1)
    magnitudes = magnitude_spectrum(samples, transform)
    axis = frequency_axis(samples.size, sample_rate)

    end = find_band_end(axis, max_freq)
    if end is None:
        available = float(axis[-1]) if axis.size else None
        if not clamp:
            raise BandUnattainableError(
                max_freq, available=available, sample_rate=sample_rate
            )
        logger.warning(
            "band ceiling %g Hz beyond available spectrum (%s); keeping all %d bins",
            max_freq,
            "empty" if available is None else f"{available:g} Hz",
            axis.size,
        )
        return SpectrumResult(magnitudes, axis, float(max_freq), clamped=True)

    logger.debug("truncating spectrum at bin %d (%g Hz)", end, axis[end])
    return SpectrumResult(magnitudes[:end], axis[:end], float(max_freq))


def dominant_bins(result: SpectrumResult, count: int = 5) -> list[tuple[float, float]]:
    """Return the ``count`` strongest bins as ``(frequency, magnitude)`` pairs.

    Pairs are ordered by decreasing magnitude; ties keep the lower frequency
    first.
    """

    if count <= 0:
        raise ValueError("count must be positive")
    order = np.argsort(-result.magnitudes, kind="stable")[:count]
    return [(float(result.frequencies[i]), float(result.magnitudes[i])) for i in order]
