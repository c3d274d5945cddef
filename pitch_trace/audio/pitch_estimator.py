"""Autocorrelation pitch estimation for single audio frames."""

from __future__ import annotations
from typing import ClassVar, Optional, Sequence, Union

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)

Frame = Union[np.ndarray, Sequence[float]]


class PitchEstimator:
    """Estimate the fundamental frequency of a mono frame by autocorrelation.

    The estimator is stateless between frames; it only holds its tuning
    constants. Every degenerate input (silence, too short, no usable peak,
    out-of-register result) yields None rather than an exception.
    """

    # Frame gates
    DEFAULT_SILENCE_RMS: ClassVar[float] = 0.01  # Below this RMS the frame is silence
    DEFAULT_CLIP_THRESHOLD: ClassVar[float] = 0.2  # Edge samples under this are trimmed

    # Instrument register guard band
    MIN_FREQUENCY: ClassVar[float] = 60.0  # Hz
    MAX_FREQUENCY: ClassVar[float] = 1400.0  # Hz

    def __init__(
        self,
        silence_rms: float = DEFAULT_SILENCE_RMS,
        clip_threshold: float = DEFAULT_CLIP_THRESHOLD,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
    ) -> None:
        """Initialize the estimator.

        Args:
            silence_rms: RMS level below which a frame reports no pitch
            clip_threshold: Absolute amplitude used to trim low-energy frame edges
            min_frequency: Lowest frequency reported, in Hz
            max_frequency: Highest frequency reported, in Hz
        """
        if min_frequency <= 0 or max_frequency <= min_frequency:
            raise ValueError("Frequency band must satisfy 0 < min_frequency < max_frequency")
        self.silence_rms = silence_rms
        self.clip_threshold = clip_threshold
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency

    def estimate(self, frame: Frame, sample_rate: float) -> Optional[float]:
        """Estimate the pitch of one frame.

        Args:
            frame: Samples in [-1, 1]
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz, or None if the frame has no stable pitch
        """
        if sample_rate <= 0:
            raise ValueError("Sample rate must be positive")

        samples = np.asarray(frame, dtype=np.float64).ravel()
        size = samples.size
        if size == 0:
            return None

        rms = float(np.sqrt(np.mean(samples * samples)))
        if not np.isfinite(rms) or rms < self.silence_rms:
            logger.debug(f"Silent frame (rms={rms:.4f})")
            return None

        segment = self._trim_edges(samples)
        if segment.size < 2:
            return None

        # corr[lag] = sum(x[i] * x[i + lag]) for lag in 0..n-1
        n = segment.size
        corr = np.correlate(segment, segment, mode="full")[n - 1:]

        # Skip the zero-lag peak and its falloff
        descending = corr[:-1] > corr[1:]
        floor = int(np.argmin(descending)) if not descending.all() else n - 1

        peak = floor + int(np.argmax(corr[floor:]))
        if peak <= 0 or peak >= n - 1:
            return None

        left, center, right = corr[peak - 1], corr[peak], corr[peak + 1]
        denominator = left - 2 * center + right
        shift = 0.5 * (left - right) / denominator if denominator != 0 else 0.0
        period = peak + shift

        if not np.isfinite(period) or period <= 0:
            return None

        frequency = float(sample_rate / period)
        if frequency < self.min_frequency or frequency > self.max_frequency:
            logger.debug(f"Estimate {frequency:.1f}Hz outside register, dropped")
            return None

        logger.debug(f"Estimated {frequency:.2f}Hz (period={period:.2f}, rms={rms:.4f})")
        return frequency

    def _trim_edges(self, samples: np.ndarray) -> np.ndarray:
        """Drop the loud leading and trailing edges of a frame.

        The left bound is the first sample under the clip threshold within the
        first half of the frame, the right bound the last such sample within
        the second half. The right bound is exclusive.
        """
        size = samples.size
        half = (size + 1) // 2
        quiet = np.abs(samples) < self.clip_threshold

        head = np.flatnonzero(quiet[:half])
        start = int(head[0]) if head.size else 0

        tail_offset = size - half + 1
        tail = np.flatnonzero(quiet[tail_offset:])
        end = tail_offset + int(tail[-1]) if tail.size else size - 1

        return samples[start:end]


_default_estimator = PitchEstimator()


def estimate_pitch(frame: Frame, sample_rate: float) -> Optional[float]:
    """Estimate the pitch of a frame with the default estimator settings."""
    return _default_estimator.estimate(frame, sample_rate)
