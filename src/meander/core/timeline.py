"""Discrete sample times for a sample rate and duration."""

from __future__ import annotations

import math
import numbers

import numpy as np


class InvalidParameterError(ValueError):
    """Raised when a sampling parameter cannot produce a valid timeline."""


def validate_sample_rate(sample_rate: int) -> int:
    """Return ``sample_rate`` as ``int`` or raise :class:`InvalidParameterError`."""

    if isinstance(sample_rate, bool) or not isinstance(sample_rate, numbers.Integral):
        raise InvalidParameterError(
            f"sample_rate must be an integer, got {sample_rate!r}"
        )
    if sample_rate <= 0:
        raise InvalidParameterError(f"sample_rate must be positive, got {sample_rate}")
    return int(sample_rate)


def sample_count(sample_rate: int, duration: float) -> int:
    """Number of samples covering ``duration`` seconds.

    The product ``duration * sample_rate`` is truncated, so the covered span
    may fall short of ``duration`` by up to one sample period.  Durations at
    or below zero give ``0``.
    """

    sample_rate = validate_sample_rate(sample_rate)
    duration = float(duration)
    if not math.isfinite(duration):
        raise InvalidParameterError(f"duration must be finite, got {duration}")
    if duration <= 0:
        return 0
    return int(math.floor(duration * sample_rate))


def build_timeline(sample_rate: int, duration: float) -> np.ndarray:
    """Return the sample instants ``i / sample_rate`` for ``duration`` seconds.

    Parameters
    ----------
    sample_rate:
        Samples per second.  Must be a positive integer.
    duration:
        Requested span in seconds.

    Returns
    -------
    numpy.ndarray
        Read-only float array starting at ``0`` and spaced by
        ``1 / sample_rate``.
    """

    n = sample_count(sample_rate, duration)
    period = 1.0 / sample_rate
    timeline = np.arange(n, dtype=float) * period
    timeline.setflags(write=False)
    return timeline
