"""Defines the host-facing interfaces for the Pitch Trace application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np


class IAudioInput(ABC):
    """Interface for audio capture sources delivering fixed-size frames."""

    @abstractmethod
    def start(self, callback: Callable[[np.ndarray, float], None]) -> bool:
        """Start capturing audio."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the captured frames."""
        pass


class IToneOutput(ABC):
    """Interface for sinks that can sound a reference tone."""

    @abstractmethod
    def play_tone(self, frequency: float, gain: float, duration_ms: float) -> None:
        """Start sounding a tone immediately."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Silence any tone that is still sounding."""
        pass


class IScheduler(ABC):
    """Interface for deferring callbacks on a millisecond clock."""

    @property
    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""
        pass

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> None:
        """Run callback once `delay_ms` has elapsed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every callback that has not run yet."""
        pass
