from __future__ import annotations

"""Persist plot bundles as NumPy archives."""

from pathlib import Path
from typing import Sequence

import numpy as np

from ..types import PlotBundle
from .artifacts import OutputError, ensure_dir


def _key(kind: str) -> str:
    return kind.replace("-", "_")


def bundles_to_npz(bundles: Sequence[PlotBundle], path: str | Path) -> Path:
    """Save the ``x``/``y`` arrays of every bundle into one ``.npz`` archive.

    Arrays are stored as ``<kind>_x`` and ``<kind>_y`` with dashes in the
    kind replaced by underscores, e.g. ``harmonic_spectrum_y``.
    """

    p = Path(path)
    ensure_dir(p.parent)
    arrays: dict[str, np.ndarray] = {}
    for bundle in bundles:
        arrays[f"{_key(bundle.kind)}_x"] = bundle.x
        arrays[f"{_key(bundle.kind)}_y"] = bundle.y
    try:
        np.savez(p, **arrays)
    except OSError as exc:
        raise OutputError(f"cannot write series archive: {exc}", path=p) from exc
    return p


def load_npz(path: str | Path) -> dict[str, tuple[np.ndarray, np.ndarray]]:
    """Load an archive written by :func:`bundles_to_npz`.

    Returns a mapping ``kind -> (x, y)`` using the underscore form of the kind.
    """

    out: dict[str, tuple[np.ndarray, np.ndarray]] = {}
    with np.load(Path(path)) as data:
        for name in data.files:
            if not name.endswith("_x"):
                continue
            key = name[:-2]
            out[key] = (data[name], data[f"{key}_y"])
    return out
