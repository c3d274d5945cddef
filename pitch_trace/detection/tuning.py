"""Tuning classification of a detected pitch against a target set."""

import math
from typing import Optional, Sequence

from ..logger import get_logger
from ..note_types import TuningResult, TuningStatus
from ..note_utils import cents_between, frequency_to_note
from ..targets import nearest_target

logger = get_logger(__name__)

MIN_TOLERANCE_CENTS = 5
MAX_TOLERANCE_CENTS = 80
DEFAULT_TOLERANCE_CENTS = 25


def clamp_tolerance(value: float) -> int:
    """Round a tolerance to whole cents and clamp it to the supported range.

    Non-finite values fall back to the default tolerance.
    """
    if not math.isfinite(value):
        logger.warning(f"Ignoring non-finite tolerance {value}")
        return DEFAULT_TOLERANCE_CENTS
    return int(min(MAX_TOLERANCE_CENTS, max(MIN_TOLERANCE_CENTS, round(value))))


def classify(
    freq: Optional[float],
    targets: Sequence[float],
    tolerance_cents: float = DEFAULT_TOLERANCE_CENTS,
) -> TuningResult:
    """Classify a frequency against its nearest target.

    Args:
        freq: Detected frequency in Hz, or None when there is no pitch
        targets: Target frequencies in Hz
        tolerance_cents: Largest absolute deviation still considered in tune

    Returns:
        TuningResult; NO_TARGET takes precedence over NO_PITCH
    """
    if not targets:
        return TuningResult(
            TuningStatus.NO_TARGET, frequency=freq, note=frequency_to_note(freq)
        )

    if freq is None or not math.isfinite(freq) or freq <= 0:
        return TuningResult(TuningStatus.NO_PITCH)

    target = nearest_target(freq, targets)
    cents = cents_between(freq, target)

    if abs(cents) <= tolerance_cents:
        status = TuningStatus.IN_TUNE
    elif cents > 0:
        status = TuningStatus.SHARP
    else:
        status = TuningStatus.FLAT

    return TuningResult(
        status,
        cents=cents,
        target=target,
        frequency=freq,
        note=frequency_to_note(freq),
    )


class TuningMonitor:
    """
    Classifies successive frames and tracks runs of missing pitch.

    A single dropped frame stays NO_PITCH; once more than `silence_frames`
    consecutive frames have no pitch the result becomes UNSTABLE.
    """

    DEFAULT_SILENCE_FRAMES = 8

    def __init__(
        self,
        tolerance_cents: float = DEFAULT_TOLERANCE_CENTS,
        silence_frames: int = DEFAULT_SILENCE_FRAMES,
    ):
        self._tolerance = clamp_tolerance(tolerance_cents)
        self._silence_frames = silence_frames
        self._muted_frames = 0

    @property
    def tolerance(self) -> int:
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        self._tolerance = clamp_tolerance(value)

    @property
    def muted_frames(self) -> int:
        return self._muted_frames

    @property
    def is_unstable(self) -> bool:
        return self._muted_frames > self._silence_frames

    def update(self, freq: Optional[float], targets: Sequence[float]) -> TuningResult:
        if freq is None or not math.isfinite(freq):
            self._muted_frames += 1
        else:
            self._muted_frames = 0

        result = classify(freq, targets, self._tolerance)
        if result.status is TuningStatus.NO_PITCH and self.is_unstable:
            return TuningResult(TuningStatus.UNSTABLE)
        return result

    def reset(self) -> None:
        self._muted_frames = 0
