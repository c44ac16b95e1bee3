"""Writing rendered charts and raw series to disk."""

from .artifacts import OutputError, artifact_name, frequency_dir, freq_suffix, write_artifacts
from .to_numpy import bundles_to_npz, load_npz

__all__ = [
    "OutputError",
    "artifact_name",
    "frequency_dir",
    "freq_suffix",
    "write_artifacts",
    "bundles_to_npz",
    "load_npz",
]
