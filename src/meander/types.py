"""Common type helpers for meander.

This module defines the lightweight containers exchanged between the
pipeline stages.  Arrays stored in these containers are frozen on
construction so a bundle handed to a renderer cannot be altered behind the
pipeline's back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

HARMONIC = "harmonic"
MEANDER = "meander"
HARMONIC_SPECTRUM = "harmonic-spectrum"
MEANDER_SPECTRUM = "meander-spectrum"

BUNDLE_KINDS = (HARMONIC, MEANDER, HARMONIC_SPECTRUM, MEANDER_SPECTRUM)


def frozen_array(values: Sequence[float] | np.ndarray, dtype=None) -> np.ndarray:
    """Return a read-only 1-D copy of ``values``."""

    arr = np.array(values, dtype=dtype, copy=True).reshape(-1)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class PlotBundle:
    """Series and labels describing a single chart.

    Attributes
    ----------
    kind:
        One of :data:`BUNDLE_KINDS`; used to name the rendered artifact.
    y, x:
        Values and axis positions.  Both must have the same length.
    title, x_label, y_label:
        Caption and axis labels handed to the renderer.
    """

    kind: str
    y: np.ndarray
    x: np.ndarray
    title: str
    x_label: str
    y_label: str

    def __post_init__(self) -> None:
        if self.kind not in BUNDLE_KINDS:
            raise ValueError(f"unknown bundle kind: {self.kind!r}")
        y = frozen_array(self.y)
        x = frozen_array(self.x, dtype=float)
        if x.shape != y.shape:
            raise ValueError(
                f"x and y must have the same length (got {x.size} and {y.size})"
            )
        object.__setattr__(self, "y", y)
        object.__setattr__(self, "x", x)

    def __len__(self) -> int:
        return int(self.x.size)
