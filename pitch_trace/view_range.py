"""Adaptive logarithmic frequency window for pitch trace display."""

import math
from typing import Optional, Sequence

from .logger import get_logger
from .note_types import ViewRange

logger = get_logger(__name__)

DEFAULT_VIEW = ViewRange(70.0, 1100.0)
ABSOLUTE_MIN_FREQ = 40.0
ABSOLUTE_MAX_FREQ = 2200.0

PADDING_SEMITONES = 3
MIN_SPAN_SEMITONES = 9
MIN_SPAN_MARGIN = 1.01  # max is always at least 1% above min
RELAX_RATE = 0.2


def _clamp(freq: float) -> float:
    return min(ABSOLUTE_MAX_FREQ, max(ABSOLUTE_MIN_FREQ, freq))


def ideal_view_range(targets: Sequence[float]) -> ViewRange:
    """Window that frames the targets with padding and a minimum span."""
    if not targets:
        return DEFAULT_VIEW

    pad = 2.0 ** (PADDING_SEMITONES / 12.0)
    low = min(targets) / pad
    high = max(targets) * pad

    min_span = 2.0 ** (MIN_SPAN_SEMITONES / 12.0)
    if high / low < min_span:
        # Re-center geometrically and widen symmetrically
        center = math.sqrt(low * high)
        half_span = math.sqrt(min_span)
        low = center / half_span
        high = center * half_span

    low = _clamp(low)
    high = _clamp(high)
    if high < low * MIN_SPAN_MARGIN:
        high = min(ABSOLUTE_MAX_FREQ, low * MIN_SPAN_MARGIN)
        low = min(low, high / MIN_SPAN_MARGIN)

    return ViewRange(low, high)


def compute_view_range(
    targets: Sequence[float],
    previous: Optional[ViewRange] = None,
    rate: float = RELAX_RATE,
) -> ViewRange:
    """Move a window toward the ideal window for the targets.

    Args:
        targets: Current target frequencies in Hz
        previous: Window shown last time, or None to snap straight to the ideal
        rate: Fraction of the remaining distance covered per call

    Returns:
        The new window
    """
    ideal = ideal_view_range(targets)
    if previous is None:
        return ideal

    return ViewRange(
        previous.min_freq + (ideal.min_freq - previous.min_freq) * rate,
        previous.max_freq + (ideal.max_freq - previous.max_freq) * rate,
    )


def frequency_to_position(freq: float, view: ViewRange) -> float:
    """Map a frequency to a height in [0, 1] on the log axis of a window."""
    clamped = min(view.max_freq, max(view.min_freq, freq))
    log_min = math.log2(view.min_freq)
    log_max = math.log2(view.max_freq)
    return (math.log2(clamped) - log_min) / (log_max - log_min)


class AdaptiveRangeEstimator:
    """Session-owned view window that relaxes toward its target-derived ideal."""

    def __init__(self, rate: float = RELAX_RATE):
        self._rate = rate
        self._view: Optional[ViewRange] = None

    @property
    def view(self) -> Optional[ViewRange]:
        return self._view

    def update(self, targets: Sequence[float]) -> ViewRange:
        self._view = compute_view_range(targets, self._view, self._rate)
        return self._view

    def reset(self) -> None:
        """Forget the current window so the next update snaps to the ideal."""
        self._view = None
