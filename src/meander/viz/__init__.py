"""Rendering helpers producing SVG charts."""

from .render import MatplotlibSvgRenderer, Renderer, RenderError
from .styles import style_context

__all__ = [
    "MatplotlibSvgRenderer",
    "Renderer",
    "RenderError",
    "style_context",
]
