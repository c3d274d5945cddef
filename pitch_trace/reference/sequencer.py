"""State machine that plays a sequence of reference tones."""

from enum import Enum
from typing import Callable, List, Optional, Sequence

from ..core.interfaces import IScheduler, IToneOutput
from ..logger import get_logger

logger = get_logger(__name__)


class SequencerState(Enum):
    IDLE = "idle"
    PLAYING_NOTE = "playing_note"
    GAP = "gap"
    DONE = "done"


class GenerationCounter:
    """Monotonically increasing id used to discard stale completions."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def advance(self) -> int:
        self._value += 1
        return self._value

    def is_current(self, generation: int) -> bool:
        return generation == self._value


class ToneSequencer:
    """Plays reference tones one after another: note, gap, next note ... done.

    Every completion scheduled for a run captures the generation the run was
    started with. Starting a new run or stopping advances the generation, so
    completions from an earlier run find a mismatch and do nothing.
    """

    DEFAULT_NOTE_MS = 700.0
    DEFAULT_GAP_MS = 150.0
    DEFAULT_GAIN = 0.2

    def __init__(
        self,
        scheduler: IScheduler,
        output: IToneOutput,
        generations: Optional[GenerationCounter] = None,
        note_ms: float = DEFAULT_NOTE_MS,
        gap_ms: float = DEFAULT_GAP_MS,
        gain: float = DEFAULT_GAIN,
        on_change: Optional[Callable[[Optional[float]], None]] = None,
    ) -> None:
        """Initialize the sequencer.

        Args:
            scheduler: Clock used to time note ends and gaps
            output: Sink that sounds each tone
            generations: Shared generation counter, or None for a private one
            note_ms: Length of each tone in milliseconds
            gap_ms: Silence between tones in milliseconds
            gain: Peak gain handed to the output
            on_change: Called with the newly scheduled frequency (None for silence)
        """
        if note_ms <= 0 or gap_ms < 0:
            raise ValueError("note_ms must be positive and gap_ms not negative")
        self._scheduler = scheduler
        self._output = output
        self._generations = generations or GenerationCounter()
        self.note_ms = note_ms
        self.gap_ms = gap_ms
        self.gain = gain
        self._on_change = on_change

        self._state = SequencerState.IDLE
        self._frequencies: List[float] = []
        self._index = 0
        self._current: Optional[float] = None

    @property
    def state(self) -> SequencerState:
        return self._state

    @property
    def current_frequency(self) -> Optional[float]:
        """Frequency scheduled right now, None between notes or when idle."""
        return self._current

    @property
    def is_active(self) -> bool:
        return self._state in (SequencerState.PLAYING_NOTE, SequencerState.GAP)

    def start(self, frequencies: Sequence[float]) -> bool:
        """Begin a new run, cancelling any run in progress.

        Returns:
            True if there was anything to play
        """
        generation = self._generations.advance()
        self._output.stop()
        self._frequencies = [f for f in frequencies if f and f > 0]
        self._index = 0

        if not self._frequencies:
            logger.warning("No reference frequencies to play")
            self._state = SequencerState.IDLE
            self._set_current(None)
            return False

        logger.info(f"Reference run {generation} started: {len(self._frequencies)} notes")
        self._play_next(generation)
        return True

    def stop(self) -> None:
        """Cancel the current run; pending completions become no-ops."""
        self._generations.advance()
        self._output.stop()
        if self._state is not SequencerState.IDLE:
            logger.info("Reference playback stopped")
        self._state = SequencerState.IDLE
        self._set_current(None)

    def _play_next(self, generation: int) -> None:
        if not self._generations.is_current(generation):
            logger.debug(f"Discarding stale reference step from run {generation}")
            return

        frequency = self._frequencies[self._index]
        self._state = SequencerState.PLAYING_NOTE
        self._output.play_tone(frequency, self.gain, self.note_ms)
        self._set_current(frequency)
        self._scheduler.call_later(self.note_ms, lambda: self._end_note(generation))

    def _end_note(self, generation: int) -> None:
        if not self._generations.is_current(generation):
            logger.debug(f"Discarding stale note end from run {generation}")
            return

        self._set_current(None)
        self._index += 1
        if self._index >= len(self._frequencies):
            self._state = SequencerState.DONE
            logger.info(f"Reference run {generation} finished")
            return

        self._state = SequencerState.GAP
        self._scheduler.call_later(self.gap_ms, lambda: self._play_next(generation))

    def _set_current(self, frequency: Optional[float]) -> None:
        if frequency == self._current:
            return
        self._current = frequency
        if self._on_change:
            self._on_change(frequency)


class SilentToneOutput(IToneOutput):
    """Tone sink that plays nothing; the reference is only traced."""

    def play_tone(self, frequency: float, gain: float, duration_ms: float) -> None:
        logger.debug(f"Silent reference tone {frequency:.1f}Hz for {duration_ms:.0f}ms")

    def stop(self) -> None:
        pass
