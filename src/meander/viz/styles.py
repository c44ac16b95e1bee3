"""Matplotlib styles for meander charts."""

from __future__ import annotations

import contextlib
from typing import Iterator

import matplotlib
import matplotlib.pyplot as plt

# Base style configuration used across all plots.  Entries can be
# overridden through the ``extra`` mapping of :func:`style_context`.
BASE_STYLE = {
    "figure.figsize": (8, 5),
    "axes.grid": True,
    "grid.linestyle": "-",
    "grid.alpha": 0.3,
    "axes.titlesize": "large",
    "axes.labelsize": "medium",
    "lines.linewidth": 1.0,
    "svg.fonttype": "none",
}


def _merged(extra: dict | None) -> dict:
    style = BASE_STYLE.copy()
    if extra:
        style.update(extra)
    return style


@contextlib.contextmanager
def style_context(theme: str = "dark_background", extra: dict | None = None) -> Iterator[None]:
    """Temporarily apply ``theme`` plus the base style.

    The global rcParams are restored on exit.
    """
    with plt.style.context(theme), matplotlib.rc_context(_merged(extra)):
        yield
