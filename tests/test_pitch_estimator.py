import numpy as np
import pytest

from pitch_trace.audio.pitch_estimator import PitchEstimator, estimate_pitch


def sine(freq, sample_rate=44100, size=2048, amplitude=0.5):
    t = np.arange(size) / sample_rate
    return amplitude * np.sin(2 * np.pi * freq * t)


@pytest.mark.parametrize(
    "freq, sample_rate, size",
    [
        (196.0, 44100, 2048),
        (261.63, 44100, 2048),
        (440.0, 44100, 2048),
        (440.0, 48000, 2048),
        (659.25, 48000, 2048),
        (880.0, 44100, 2048),
        (1000.0, 44100, 2048),
        (110.0, 44100, 4096),
        (82.41, 44100, 8192),
    ],
)
def test_sine_within_one_percent(freq, sample_rate, size):
    estimate = estimate_pitch(sine(freq, sample_rate, size), sample_rate)
    assert estimate is not None
    assert abs(estimate - freq) / freq < 0.01


def test_harmonic_rich_tone_reports_fundamental():
    sample_rate = 44100
    t = np.arange(2048) / sample_rate
    wave = (
        0.4 * np.sin(2 * np.pi * 220.0 * t)
        + 0.2 * np.sin(2 * np.pi * 440.0 * t)
        + 0.1 * np.sin(2 * np.pi * 660.0 * t)
    )
    estimate = estimate_pitch(wave, sample_rate)
    assert estimate is not None
    assert abs(estimate - 220.0) / 220.0 < 0.01


def test_accepts_float32_lists():
    frame = sine(440.0).astype(np.float32)
    assert estimate_pitch(frame, 44100) == pytest.approx(
        estimate_pitch(list(frame), 44100)
    )


@pytest.mark.parametrize("size", [0, 1, 2, 3])
def test_short_frames_have_no_pitch(size):
    assert estimate_pitch(np.full(size, 0.5), 44100) is None


def test_silence_has_no_pitch():
    assert estimate_pitch(np.zeros(2048), 44100) is None


def test_quiet_signal_below_gate_has_no_pitch():
    assert estimate_pitch(sine(440.0, amplitude=0.005), 44100) is None


def test_constant_signal_has_no_pitch():
    # Monotonic autocorrelation leaves the peak at the array boundary
    assert estimate_pitch(np.full(2048, 0.5), 44100) is None


def test_non_finite_samples_have_no_pitch():
    frame = sine(440.0)
    frame[10] = np.nan
    assert estimate_pitch(frame, 44100) is None


def test_out_of_register_rejected():
    # 40 Hz is below the 60 Hz guard band
    assert estimate_pitch(sine(40.0, size=8192), 44100) is None
    # 2000 Hz is above the 1400 Hz guard band
    assert estimate_pitch(sine(2000.0), 44100) is None


def test_custom_band_and_gate():
    estimator = PitchEstimator(silence_rms=0.001, min_frequency=30.0, max_frequency=3000.0)
    estimate = estimator.estimate(sine(2000.0, amplitude=0.5), 44100)
    assert estimate is not None
    assert abs(estimate - 2000.0) / 2000.0 < 0.01
    assert estimator.estimate(sine(440.0, amplitude=0.005), 44100) is not None


def test_invalid_sample_rate_raises():
    with pytest.raises(ValueError):
        estimate_pitch(sine(440.0), 0)


def test_invalid_band_raises():
    with pytest.raises(ValueError):
        PitchEstimator(min_frequency=500.0, max_frequency=100.0)
