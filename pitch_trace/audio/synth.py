"""Reference tone synthesis."""

import numpy as np

DEFAULT_FADE_MS = 10.0


def gain_envelope(num_samples: int, fade_samples: int, gain: float) -> np.ndarray:
    """Linear attack/release envelope peaking at `gain`."""
    envelope = np.full(num_samples, gain, dtype=np.float32)
    fade = min(fade_samples, num_samples // 2)
    if fade > 0:
        ramp = np.linspace(0.0, gain, fade, endpoint=False, dtype=np.float32)
        envelope[:fade] = ramp
        envelope[num_samples - fade:] = ramp[::-1]
    return envelope


def render_tone(
    frequency: float,
    gain: float,
    duration_ms: float,
    sample_rate: int,
    fade_ms: float = DEFAULT_FADE_MS,
) -> np.ndarray:
    """Render a sine tone with a click-free gain envelope.

    Args:
        frequency: Tone frequency in Hz
        gain: Peak amplitude in [0, 1]
        duration_ms: Tone length in milliseconds
        sample_rate: Output sample rate in Hz
        fade_ms: Length of the attack and release ramps

    Returns:
        Mono float32 samples
    """
    if sample_rate <= 0:
        raise ValueError("Sample rate must be positive")

    num_samples = max(0, int(round(sample_rate * duration_ms / 1000.0)))
    t = np.arange(num_samples, dtype=np.float64) / sample_rate
    wave = np.sin(2 * np.pi * frequency * t).astype(np.float32)

    fade_samples = int(round(sample_rate * fade_ms / 1000.0))
    return wave * gain_envelope(num_samples, fade_samples, gain)
