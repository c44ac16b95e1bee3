"""Waveform synthesis over a timeline."""

from __future__ import annotations

from typing import Sequence

import numpy as np


def sine(freq: float, timeline: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return ``sin(2*pi*freq*t)`` for every ``t`` in ``timeline``.

    One sample is produced per timeline entry whatever the sign or size of
    ``freq``.
    """

    t = np.asarray(timeline, dtype=float)
    return np.sin(2.0 * np.pi * float(freq) * t)


def square_from(signal: Sequence[float] | np.ndarray) -> np.ndarray:
    """Clip ``signal`` to a 0/1 meander.

    Samples strictly above zero map to ``1``; zero and negative samples map
    to ``0``.  The duty cycle therefore follows the source signal rather
    than a nominal frequency or phase.
    """

    arr = np.asarray(signal, dtype=float)
    return (arr > 0.0).astype(np.uint8)
