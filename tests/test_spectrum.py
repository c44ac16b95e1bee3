import numpy as np
import pytest

from meander.core import (
    BandUnattainableError,
    InvalidParameterError,
    TransformError,
    analyze,
    build_timeline,
    dominant_bins,
    find_band_end,
    frequency_axis,
    magnitude_spectrum,
    sine,
    square_from,
)


def _reference_sine(freq=1.0, sample_rate=500, duration=16.0):
    return sine(freq, build_timeline(sample_rate, duration))


def test_frequency_axis_bins():
    axis = frequency_axis(8000, 500)
    assert axis.size == 4000
    np.testing.assert_array_equal(axis, np.arange(4000) * 0.0625)


def test_frequency_axis_odd_length():
    axis = frequency_axis(7, 7)
    assert axis.tolist() == [0.0, 1.0, 2.0]


def test_frequency_axis_empty():
    assert frequency_axis(0, 500).size == 0
    assert frequency_axis(1, 500).size == 0


@pytest.mark.parametrize(
    "max_freq, expected",
    [(0.0, 0), (2.0, 2), (2.5, 3), (3.0, 3), (10.0, None)],
)
def test_find_band_end(max_freq, expected):
    assert find_band_end([0.0, 1.0, 2.0, 3.0], max_freq) == expected


def test_find_band_end_empty_axis():
    assert find_band_end([], 1.0) is None


def test_reference_harmonic_spectrum():
    result = analyze(_reference_sine(), 500, 15.0)
    assert len(result) == 240
    assert result.frequencies.size == result.magnitudes.size == 240
    np.testing.assert_array_equal(result.frequencies, np.arange(240) * 0.0625)
    assert int(np.argmax(result.magnitudes)) == 16
    assert result.magnitudes[16] == pytest.approx(4000.0, rel=1e-9)
    assert not result.clamped


def test_reference_meander_spectrum_at_8hz():
    square = square_from(_reference_sine(8.0, 500, 16.0 / 8.0))
    assert square.size == 1000
    result = analyze(square, 500, 120.0)
    assert len(result) == 240
    assert result.frequencies[-1] == 119.5


@pytest.mark.parametrize("max_freq", [0.3, 1.0, 7.77, 15.0, 100.0])
def test_truncation_boundary(max_freq):
    signal = _reference_sine(2.0, 500, 8.0)
    full = frequency_axis(signal.size, 500)
    result = analyze(signal, 500, max_freq)
    j = len(result)
    if j:
        assert result.frequencies[-1] < max_freq
    assert full[j] >= max_freq
    np.testing.assert_array_equal(result.frequencies, full[:j])


def test_boundary_bin_is_excluded():
    # 1.0 Hz falls exactly on bin 16 of the reference axis
    result = analyze(_reference_sine(), 500, 1.0)
    assert len(result) == 16
    assert 1.0 not in result.frequencies.tolist()


def test_analyze_is_idempotent():
    signal = _reference_sine(4.0, 500, 4.0)
    first = analyze(signal, 500, 15.0)
    second = analyze(signal, 500, 15.0)
    np.testing.assert_array_equal(first.magnitudes, second.magnitudes)
    np.testing.assert_array_equal(first.frequencies, second.frequencies)


def test_analyze_does_not_modify_signal():
    signal = _reference_sine(4.0, 500, 4.0)
    before = signal.copy()
    analyze(signal, 500, 15.0)
    np.testing.assert_array_equal(signal, before)


def test_band_unattainable_raises():
    signal = _reference_sine(1.0, 100, 1.0)
    with pytest.raises(BandUnattainableError) as info:
        analyze(signal, 100, 80.0)
    err = info.value
    assert err.max_freq == 80.0
    assert err.available == 49.0
    assert err.sample_rate == 100
    assert "80 Hz" in str(err)


def test_band_unattainable_clamps():
    signal = _reference_sine(1.0, 100, 1.0)
    result = analyze(signal, 100, 80.0, clamp=True)
    assert result.clamped
    assert len(result) == 50
    assert result.frequencies[-1] == 49.0


def test_band_unattainable_on_empty_signal():
    with pytest.raises(BandUnattainableError) as info:
        analyze([], 500, 15.0)
    assert info.value.available is None


def test_error_carries_frequency():
    err = BandUnattainableError(300.0, available=249.9, sample_rate=500)
    err.with_freq(2.0)
    assert err.freq == 2.0
    assert "2 Hz signal" in str(err)


def test_invalid_sample_rate():
    with pytest.raises(InvalidParameterError):
        analyze([0.0, 1.0], 0, 1.0)


def test_custom_transform_matches_default():
    signal = square_from(_reference_sine(2.0, 500, 8.0))
    default = analyze(signal, 500, 120.0)
    custom = analyze(signal, 500, 120.0, transform=np.fft.fft)
    np.testing.assert_allclose(custom.magnitudes, default.magnitudes, atol=1e-8)


def test_transform_receives_complex_samples():
    seen = {}

    def transform(samples):
        seen["dtype"] = samples.dtype
        seen["imag"] = np.abs(samples.imag).max()
        return np.fft.fft(samples)

    magnitude_spectrum([1.0, 0.0, -1.0, 0.0], transform)
    assert np.issubdtype(seen["dtype"], np.complexfloating)
    assert seen["imag"] == 0.0


def test_empty_signal_skips_transform():
    def transform(samples):
        raise AssertionError("transform should not run")

    assert magnitude_spectrum([], transform).size == 0


def test_transform_failure_is_wrapped():
    def transform(samples):
        raise RuntimeError("boom")

    with pytest.raises(TransformError) as info:
        magnitude_spectrum([1.0, 2.0], transform)
    assert isinstance(info.value.__cause__, RuntimeError)


def test_transform_wrong_length():
    with pytest.raises(TransformError):
        magnitude_spectrum([1.0, 2.0, 3.0, 4.0], lambda s: np.fft.fft(s)[:2])


def test_result_arrays_are_read_only():
    result = analyze(_reference_sine(), 500, 15.0)
    with pytest.raises(ValueError):
        result.magnitudes[0] = 0.0


def test_dominant_bins():
    result = analyze(_reference_sine(), 500, 15.0)
    top = dominant_bins(result, 3)
    assert len(top) == 3
    assert top[0][0] == 1.0
    assert top[0][1] == pytest.approx(4000.0, rel=1e-9)
    assert top[0][1] >= top[1][1] >= top[2][1]
    with pytest.raises(ValueError):
        dominant_bins(result, 0)
