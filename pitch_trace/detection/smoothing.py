from typing import Optional

from ..logger import get_logger

logger = get_logger(__name__)


class PitchSmoother:
    """
    Exponential moving average over per-frame pitch estimates.

    A missing estimate clears the average so nothing carries over a silence.
    """

    DEFAULT_FACTOR = 0.22

    def __init__(self, factor: float = DEFAULT_FACTOR):
        if not 0.0 < factor <= 1.0:
            raise ValueError("factor must be in (0, 1]")
        self._factor = factor
        self._value: Optional[float] = None

    @property
    def value(self) -> Optional[float]:
        return self._value

    def update(self, estimate: Optional[float]) -> Optional[float]:
        """Blend a new estimate into the average and return the smoothed pitch."""
        if estimate is None:
            self._value = None
        elif self._value is None:
            self._value = estimate
        else:
            self._value = self._value * (1.0 - self._factor) + estimate * self._factor
        return self._value

    def reset(self) -> None:
        self._value = None
