from __future__ import annotations

"""Output layout for rendered charts.

Each test frequency gets its own directory ``<root>/freq<suffix>/`` holding
one SVG per chart.  Directories are created on demand and existing files are
overwritten.
"""

import logging
from pathlib import Path
from typing import Mapping

from ..types import HARMONIC, HARMONIC_SPECTRUM, MEANDER, MEANDER_SPECTRUM

logger = logging.getLogger(__name__)

EXTENSION = ".svg"


class OutputError(OSError):
    """Raised when an output directory or file cannot be written."""

    def __init__(self, message: str, *, path: str | Path):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


def freq_suffix(freq: float) -> str:
    """Return the label used in directory and file names for ``freq``.

    Integral frequencies use their integer form (``8.0`` -> ``"8"``); other
    values replace the decimal point with ``_`` (``2.5`` -> ``"2_5"``).
    """

    value = float(freq)
    if value.is_integer():
        return str(int(value))
    return repr(value).replace(".", "_")


def frequency_dir(root: str | Path, freq: float) -> Path:
    """Directory holding the charts of ``freq``."""

    return Path(root) / f"freq{freq_suffix(freq)}"


def artifact_name(kind: str, freq: float) -> str:
    """File name for chart ``kind`` at ``freq``.

    Spectrum charts carry a ``-spectrum`` suffix after the frequency label,
    e.g. ``harmonic-freq1-spectrum.svg``.
    """

    suffix = freq_suffix(freq)
    if kind in (HARMONIC, MEANDER):
        return f"{kind}-freq{suffix}{EXTENSION}"
    if kind == HARMONIC_SPECTRUM:
        return f"{HARMONIC}-freq{suffix}-spectrum{EXTENSION}"
    if kind == MEANDER_SPECTRUM:
        return f"{MEANDER}-freq{suffix}-spectrum{EXTENSION}"
    raise ValueError(f"unknown chart kind: {kind!r}")


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"cannot create output directory: {exc}", path=p) from exc
    return p


def write_artifacts(root: str | Path, freq: float, charts: Mapping[str, str]) -> list[Path]:
    """Write ``charts`` (kind -> SVG text) for ``freq`` below ``root``.

    Returns the written paths in the order of ``charts``.
    """

    directory = ensure_dir(frequency_dir(root, freq))
    written: list[Path] = []
    for kind, svg in charts.items():
        path = directory / artifact_name(kind, freq)
        try:
            path.write_text(svg, encoding="utf8")
        except OSError as exc:
            raise OutputError(f"cannot write chart: {exc}", path=path) from exc
        logger.debug("wrote %s", path)
        written.append(path)
    return written
