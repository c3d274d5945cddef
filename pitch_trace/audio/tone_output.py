"""Reference tone playback through sounddevice."""

from __future__ import annotations
from typing import Optional

import sounddevice as sd

from ..core.interfaces import IToneOutput
from ..logger import get_logger
from .synth import render_tone

logger = get_logger(__name__)


class SoundDeviceToneOutput(IToneOutput):
    """Plays rendered reference tones on an output device without blocking."""

    def __init__(self, device_id: Optional[int] = None, sample_rate: int = 44100) -> None:
        self._device_id = device_id
        self._sample_rate = sample_rate

    def play_tone(self, frequency: float, gain: float, duration_ms: float) -> None:
        samples = render_tone(frequency, gain, duration_ms, self._sample_rate)
        try:
            sd.play(samples, samplerate=self._sample_rate, device=self._device_id)
        except Exception as e:
            logger.error(f"Could not play reference tone {frequency:.1f}Hz: {e}")

    def stop(self) -> None:
        try:
            sd.stop()
        except Exception as e:
            logger.error(f"Error stopping reference tone: {e}")
