"""Fixed-capacity frequency trace history."""

from collections import deque
from typing import Deque, Iterator, List, Optional

DEFAULT_TRACE_LENGTH = 700


class TraceBuffer:
    """FIFO of frequency-or-None values, one per display tick.

    The oldest value is evicted once capacity is reached.
    """

    def __init__(self, capacity: int = DEFAULT_TRACE_LENGTH):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._values: Deque[Optional[float]] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._values.maxlen

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Optional[float]]:
        return iter(self._values)

    def append(self, frequency: Optional[float]) -> None:
        self._values.append(frequency)

    @property
    def latest(self) -> Optional[float]:
        return self._values[-1] if self._values else None

    def values(self) -> List[Optional[float]]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()
