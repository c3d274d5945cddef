"""Tuner session tying the analysis pipeline to its mutable state."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .audio.pitch_estimator import PitchEstimator
from .core.events import TunerEvents, TunerEventType
from .core.interfaces import IScheduler, IToneOutput
from .detection.smoothing import PitchSmoother
from .detection.tuning import DEFAULT_TOLERANCE_CENTS, TuningMonitor
from .logger import get_logger
from .note_types import ScaleTarget, TargetSpec, TuningResult, ViewRange
from .reference.scheduler import TaskQueueScheduler
from .reference.sequencer import GenerationCounter, SilentToneOutput, ToneSequencer
from .reference.sync_buffer import DEFAULT_DELAY_MS, DEFAULT_RETENTION_MS, ReferenceHistory
from .targets import build_targets
from .trace_buffer import DEFAULT_TRACE_LENGTH, TraceBuffer
from .view_range import AdaptiveRangeEstimator

logger = get_logger(__name__)


@dataclass(frozen=True)
class DisplayState:
    """Everything a renderer needs for one display tick."""

    view: ViewRange
    detected: Optional[float]  # Smoothed detected pitch in Hz
    reference: Optional[float]  # Reference pitch audible now in Hz
    result: Optional[TuningResult]


def _is_discontinuous(previous: Optional[TargetSpec], new: Optional[TargetSpec]) -> bool:
    """True when a target change switches mode, tonic or scale."""
    if type(previous) is not type(new):
        return True
    if isinstance(new, ScaleTarget):
        return (previous.tonic, previous.template, previous.octaves) != (
            new.tonic,
            new.template,
            new.octaves,
        )
    return False


class TunerSession:
    """Owns all per-session state of the tuner.

    The audio tick calls `process_frame` and the display tick calls
    `display_tick`. Both are expected on one thread of control; a host that
    captures on another thread must hand frames over (e.g. through a queue).
    """

    def __init__(
        self,
        target: Optional[TargetSpec] = None,
        tolerance_cents: float = DEFAULT_TOLERANCE_CENTS,
        trace_length: int = DEFAULT_TRACE_LENGTH,
        reference_delay_ms: float = DEFAULT_DELAY_MS,
        reference_retention_ms: float = DEFAULT_RETENTION_MS,
        silence_frames: int = TuningMonitor.DEFAULT_SILENCE_FRAMES,
        smoothing_factor: float = PitchSmoother.DEFAULT_FACTOR,
        estimator: Optional[PitchEstimator] = None,
        scheduler: Optional[IScheduler] = None,
        tone_output: Optional[IToneOutput] = None,
        note_ms: float = ToneSequencer.DEFAULT_NOTE_MS,
        gap_ms: float = ToneSequencer.DEFAULT_GAP_MS,
        gain: float = ToneSequencer.DEFAULT_GAIN,
    ) -> None:
        """Initialize the session.

        Args:
            target: Initial target specification, or None for no target
            tolerance_cents: In-tune tolerance, clamped to [5, 80]
            trace_length: Capacity of the detected and reference traces
            reference_delay_ms: Playback latency applied to the reference
            reference_retention_ms: How long reference history is kept
            silence_frames: Missing-pitch frames tolerated before UNSTABLE
            smoothing_factor: Weight of each new estimate in the smoothed pitch
            estimator: Pitch estimator, or None for the default settings
            scheduler: Clock for reference sequencing, or None for a task queue
            tone_output: Reference tone sink, or None to only trace the reference
            note_ms: Reference note length in milliseconds
            gap_ms: Silence between reference notes in milliseconds
            gain: Reference tone gain
        """
        self.events = TunerEvents()

        self._estimator = estimator or PitchEstimator()
        self._smoother = PitchSmoother(smoothing_factor)
        self._monitor = TuningMonitor(tolerance_cents, silence_frames)
        self._range = AdaptiveRangeEstimator()

        self._reference_history = ReferenceHistory(reference_retention_ms)
        self._reference_delay_ms = reference_delay_ms
        self.pitch_trace = TraceBuffer(trace_length)
        self.reference_trace = TraceBuffer(trace_length)

        self._generations = GenerationCounter()
        self.scheduler = scheduler or TaskQueueScheduler()
        self.sequencer = ToneSequencer(
            self.scheduler,
            tone_output or SilentToneOutput(),
            self._generations,
            note_ms=note_ms,
            gap_ms=gap_ms,
            gain=gain,
            on_change=self._on_reference_changed,
        )

        self._target: Optional[TargetSpec] = None
        self._targets: Tuple[float, ...] = ()
        self._running = False
        self._raw_pitch: Optional[float] = None
        self._last_result: Optional[TuningResult] = None

        if target is not None:
            self.set_target(target)

    # State accessors
    @property
    def running(self) -> bool:
        return self._running

    @property
    def target(self) -> Optional[TargetSpec]:
        return self._target

    @property
    def targets(self) -> Tuple[float, ...]:
        return self._targets

    @property
    def tolerance(self) -> int:
        return self._monitor.tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        self._monitor.tolerance = value
        logger.info(f"Tolerance set to {self._monitor.tolerance} cents")

    @property
    def raw_pitch(self) -> Optional[float]:
        return self._raw_pitch

    @property
    def smoothed_pitch(self) -> Optional[float]:
        return self._smoother.value

    @property
    def last_result(self) -> Optional[TuningResult]:
        return self._last_result

    @property
    def view_range(self) -> Optional[ViewRange]:
        return self._range.view

    @property
    def generation(self) -> int:
        return self._generations.value

    @property
    def reference_history(self) -> ReferenceHistory:
        return self._reference_history

    # Lifecycle
    def start(self) -> None:
        """Start monitoring with a clean slate."""
        if self._running:
            logger.warning("Session already running")
            return

        self.sequencer.stop()
        self.scheduler.clear()
        self._reset_state()
        self._running = True
        logger.info(f"Monitoring started (targets: {len(self._targets)})")

    def stop(self) -> None:
        """Stop monitoring and cancel any reference playback."""
        if not self._running:
            return

        self._running = False
        self.sequencer.stop()
        self.scheduler.clear()
        self._smoother.reset()
        self._monitor.reset()
        self._raw_pitch = None
        logger.info("Monitoring stopped")

    def _reset_state(self) -> None:
        self._smoother.reset()
        self._monitor.reset()
        self._range.reset()
        self._reference_history.clear()
        self.pitch_trace.clear()
        self.reference_trace.clear()
        self._raw_pitch = None
        self._last_result = None

    def set_target(self, target: Optional[TargetSpec]) -> Tuple[float, ...]:
        """Select what to tune against.

        Returns:
            The new target frequencies (possibly empty)
        """
        previous = self._target
        self._target = target
        self._targets = tuple(build_targets(target))

        if _is_discontinuous(previous, target):
            self._range.reset()

        logger.info(f"Target set to {target} ({len(self._targets)} frequencies)")
        return self._targets

    # Audio tick
    def process_frame(self, frame: np.ndarray, sample_rate: float) -> Optional[TuningResult]:
        """Analyze one captured frame.

        Returns:
            The tuning result for this frame, or None if the session is stopped
        """
        if not self._running:
            logger.debug("Frame ignored: session not running")
            return None

        self._raw_pitch = self._estimator.estimate(frame, sample_rate)
        smoothed = self._smoother.update(self._raw_pitch)

        was_unstable = self._monitor.is_unstable
        result = self._monitor.update(smoothed, self._targets)

        previous = self._last_result
        self._last_result = result

        self.events.emit(TunerEventType.PITCH_UPDATED, result)
        if previous is None or previous.status is not result.status:
            self.events.emit(
                TunerEventType.STATUS_CHANGED,
                previous.status if previous else None,
                result,
            )
        if self._monitor.is_unstable and not was_unstable:
            logger.info("No stable pitch detected")
            self.events.emit(TunerEventType.SIGNAL_LOST)

        return result

    # Display tick
    def display_tick(self, now_ms: float) -> DisplayState:
        """Advance traces, reference history and view range by one display frame."""
        self._reference_history.push(now_ms, self.sequencer.current_frequency)
        audible = self._reference_history.sync(now_ms, self._reference_delay_ms)

        detected = self._smoother.value
        self.pitch_trace.append(detected)
        self.reference_trace.append(audible)

        view = self._range.update(self._targets)
        return DisplayState(view, detected, audible, self._last_result)

    # Reference playback
    def play_reference(self, frequencies: Optional[Sequence[float]] = None) -> bool:
        """Play reference tones, by default the current target set in order."""
        if frequencies is None:
            frequencies = self._targets
        return self.sequencer.start(frequencies)

    def stop_reference(self) -> None:
        self.sequencer.stop()

    def _on_reference_changed(self, frequency: Optional[float]) -> None:
        self.events.emit(TunerEventType.REFERENCE_CHANGED, frequency)
