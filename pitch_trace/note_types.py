"""Type definitions for the Pitch Trace project."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class NoteInfo:
    """Nearest equal-temperament note for a frequency."""

    name: str  # Pitch class + octave (e.g., 'A4', 'C#3')
    midi: int  # MIDI-style pitch number (A4 = 69)
    cents: float  # Signed offset from the nearest note
    frequency: float  # Exact frequency of the nearest note in Hz

    @property
    def label(self) -> str:
        return f"{self.name} ({self.cents:+.1f}c)"


class TuningStatus(Enum):
    """Classification of a detected pitch against the target set."""

    IN_TUNE = "in_tune"
    SHARP = "sharp"
    FLAT = "flat"
    NO_TARGET = "no_target"
    NO_PITCH = "no_pitch"
    UNSTABLE = "unstable"  # sustained silence


@dataclass(frozen=True)
class TuningResult:
    """Outcome of classifying one (smoothed) pitch estimate."""

    status: TuningStatus
    cents: Optional[float] = None  # Signed deviation from the nearest target
    target: Optional[float] = None  # Nearest target frequency in Hz
    frequency: Optional[float] = None  # The classified frequency in Hz
    note: Optional[NoteInfo] = None

    @property
    def magnitude(self) -> Optional[float]:
        """Signed offset when in tune, absolute offset when sharp or flat."""
        if self.cents is None:
            return None
        if self.status is TuningStatus.IN_TUNE:
            return self.cents
        return abs(self.cents)

    def describe(self) -> str:
        """Human readable status line."""
        if self.status is TuningStatus.IN_TUNE:
            return f"In tune ({self.cents:+.1f}c)"
        if self.status is TuningStatus.SHARP:
            return f"Sharp by {abs(self.cents):.1f}c"
        if self.status is TuningStatus.FLAT:
            return f"Flat by {abs(self.cents):.1f}c"
        if self.status is TuningStatus.NO_TARGET:
            return "No target selected"
        if self.status is TuningStatus.UNSTABLE:
            return "No stable pitch detected"
        return "Listening..."


@dataclass(frozen=True)
class ViewRange:
    """Logarithmic frequency window for display."""

    min_freq: float
    max_freq: float

    @property
    def span_ratio(self) -> float:
        return self.max_freq / self.min_freq


@dataclass(frozen=True)
class ReferenceSample:
    """A reference frequency (or silence) scheduled at a point in time."""

    timestamp: float  # Milliseconds
    frequency: Optional[float]


@dataclass(frozen=True)
class SingleNoteTarget:
    """Target a single note by name (e.g., 'A4')."""

    note: str


@dataclass(frozen=True)
class ScaleTarget:
    """Target every degree of a scale built from a tonic and interval template."""

    tonic: str  # e.g. 'C3'
    template: str  # Key into INTERVAL_TEMPLATES, e.g. 'major'
    octaves: int = 1


TargetSpec = Union[SingleNoteTarget, ScaleTarget]
