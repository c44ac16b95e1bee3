import json

import pytest
from omegaconf import OmegaConf
from pydantic import ValidationError

from meander.config import Settings, load_settings


def test_defaults():
    s = Settings()
    assert s.signal.sample_rate == 500
    assert s.signal.base_duration == 16.0
    assert s.signal.test_freqs == [1.0, 2.0, 4.0, 8.0]
    assert s.bands.harmonic == 15.0
    assert s.bands.square == 120.0
    assert s.analysis.band_policy == "skip"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MEANDER_SIGNAL__SAMPLE_RATE", "1000")
    monkeypatch.setenv("MEANDER_ANALYSIS__BAND_POLICY", "clamp")
    s = Settings()
    assert s.signal.sample_rate == 1000
    assert s.analysis.band_policy == "clamp"


def test_test_freqs_from_string():
    s = Settings.model_validate({"signal": {"test_freqs": "3, 5"}})
    assert s.signal.test_freqs == [3.0, 5.0]


@pytest.mark.parametrize(
    "data",
    [
        {"signal": {"sample_rate": 0}},
        {"signal": {"base_duration": -1.0}},
        {"analysis": {"band_policy": "ignore"}},
    ],
)
def test_rejects_invalid_values(data):
    with pytest.raises(ValidationError):
        Settings.model_validate(data)


def test_assignment_is_validated():
    s = Settings()
    with pytest.raises(ValidationError):
        s.signal.sample_rate = -5


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"bands": {"square": 60.0}, "signal": {"sample_rate": 250}}))
    s = load_settings(p)
    assert s.bands.square == 60.0
    assert s.signal.sample_rate == 250


def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    OmegaConf.save(
        OmegaConf.create({"signal": {"test_freqs": [2, 3]}, "output": {"root": "charts"}}),
        p,
    )
    s = load_settings(p)
    assert s.signal.test_freqs == [2.0, 3.0]
    assert s.output.root == "charts"


def test_load_settings_requires_mapping(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)
