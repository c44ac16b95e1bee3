from __future__ import annotations

"""Chart renderer protocol and the default matplotlib SVG implementation."""

import io
import logging
from typing import Protocol, Sequence, runtime_checkable

import numpy as np
from matplotlib.figure import Figure

from ..config import RenderSettings
from .styles import style_context

logger = logging.getLogger(__name__)


class RenderError(RuntimeError):
    """Raised when a chart cannot be rendered.

    ``kind`` and ``freq`` identify the plot that failed.
    """

    def __init__(self, message: str, *, kind: str | None = None, freq: float | None = None):
        self.kind = kind
        self.freq = freq
        context = []
        if kind is not None:
            context.append(kind)
        if freq is not None:
            context.append(f"{freq:g} Hz")
        prefix = f"[{', '.join(context)}] " if context else ""
        super().__init__(f"{prefix}{message}")


@runtime_checkable
class Renderer(Protocol):
    """Protocol describing a chart renderer.

    Renderers receive the x positions, y values, a caption and axis labels and
    return an SVG document as text.
    """

    def render(
        self,
        x: Sequence[float],
        y: Sequence[float],
        title: str,
        x_label: str,
        y_label: str,
    ) -> str:
        """Return the chart as SVG text."""


class MatplotlibSvgRenderer:
    """Line chart on a dark theme, serialised as SVG."""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings or RenderSettings()

    def _rc(self) -> dict:
        s = self.settings
        return {
            "figure.figsize": tuple(s.figsize),
            "figure.dpi": s.dpi,
            "axes.grid": s.tick_lines,
            "lines.linewidth": s.line_width,
        }

    def render(
        self,
        x: Sequence[float],
        y: Sequence[float],
        title: str,
        x_label: str,
        y_label: str,
    ) -> str:
        xs = np.asarray(x, dtype=float)
        ys = np.asarray(y, dtype=float)
        if xs.shape != ys.shape:
            raise RenderError(f"x and y lengths differ ({xs.size} vs {ys.size})")

        with style_context(self.settings.style, self._rc()):
            fig = Figure()
            ax = fig.add_subplot()
            ax.plot(xs, ys)
            ax.set_title(title)
            ax.set_xlabel(x_label)
            ax.set_ylabel(y_label)
            buf = io.BytesIO()
            fig.savefig(buf, format="svg", bbox_inches="tight")
        logger.debug("rendered %r with %d points", title, xs.size)
        return buf.getvalue().decode("utf-8")
