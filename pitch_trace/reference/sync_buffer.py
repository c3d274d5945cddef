"""Latency-compensated history of the scheduled reference frequency."""

from collections import deque
from typing import Deque, Iterator, Optional

from ..logger import get_logger
from ..note_types import ReferenceSample

logger = get_logger(__name__)

DEFAULT_RETENTION_MS = 5000.0
DEFAULT_DELAY_MS = 90.0


class ReferenceHistory:
    """Time-ordered reference samples trimmed to a retention window.

    At least one sample is always kept once anything has been pushed, so a
    most-recent-known value is available as a fallback.
    """

    def __init__(self, retention_ms: float = DEFAULT_RETENTION_MS):
        self._retention_ms = retention_ms
        self._samples: Deque[ReferenceSample] = deque()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[ReferenceSample]:
        return iter(self._samples)

    def push(self, now: float, frequency: Optional[float]) -> None:
        """Record the frequency scheduled at `now` (milliseconds)."""
        self._samples.append(ReferenceSample(now, frequency))
        cutoff = now - self._retention_ms
        while len(self._samples) > 1 and self._samples[1].timestamp < cutoff:
            self._samples.popleft()

    def sync(self, now: float, delay_ms: float = DEFAULT_DELAY_MS) -> Optional[float]:
        """Frequency audible at `now`, i.e. the one scheduled `delay_ms` earlier."""
        if not self._samples:
            return None

        audible_at = now - delay_ms
        for sample in reversed(self._samples):
            if sample.timestamp <= audible_at:
                return sample.frequency
        return self._samples[0].frequency

    def clear(self) -> None:
        self._samples.clear()


def push_reference(history: ReferenceHistory, now: float, frequency: Optional[float]) -> None:
    history.push(now, frequency)


def sync_reference(
    history: ReferenceHistory, now: float, delay_ms: float = DEFAULT_DELAY_MS
) -> Optional[float]:
    return history.sync(now, delay_ms)
