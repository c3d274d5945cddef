"""Event system for Pitch Trace components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class TunerEventType(Enum):
    """Event types emitted by a tuner session."""

    PITCH_UPDATED = auto()
    STATUS_CHANGED = auto()
    SIGNAL_LOST = auto()
    REFERENCE_CHANGED = auto()


class EventEmitter:
    """Event emitter for Pitch Trace components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in self._listeners[event_type]:
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")


class TunerEvents:
    """Event emitter specifically for tuner session events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_pitch_updated(self, callback: Callable) -> None:
        """Register a callback receiving the TuningResult of every frame."""
        self._emitter.on(TunerEventType.PITCH_UPDATED, callback)

    def on_status_changed(self, callback: Callable) -> None:
        """Register a callback receiving (previous_status, result) on status changes."""
        self._emitter.on(TunerEventType.STATUS_CHANGED, callback)

    def on_signal_lost(self, callback: Callable) -> None:
        """Register a callback for the start of a sustained silence."""
        self._emitter.on(TunerEventType.SIGNAL_LOST, callback)

    def on_reference_changed(self, callback: Callable) -> None:
        """Register a callback receiving the newly scheduled reference frequency."""
        self._emitter.on(TunerEventType.REFERENCE_CHANGED, callback)

    def emit(self, event_type: TunerEventType, *args) -> None:
        self._emitter.emit(event_type, *args)
