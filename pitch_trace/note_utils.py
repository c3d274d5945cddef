"""Utility functions for working with musical notes and frequencies."""

import re
from typing import List, Optional

import numpy as np

from .logger import get_logger
from .note_types import NoteInfo

# Get logger for this module
logger = get_logger(__name__)

# Standard reference: A4 = 440Hz (MIDI 69)
A4_FREQUENCY = 440.0
A4_MIDI = 69

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Compile regex to extract pitch class and octave
# This pattern matches:
# - Note letter (A-G, upper case only)
# - Optional sharp (flats are not accepted)
# - Octave number, possibly negative
NOTE_PATTERN = re.compile(r"^([A-G]#?)(-?\d+)$")


def midi_to_frequency(midi: float) -> float:
    """Convert a MIDI-style pitch number to its equal-temperament frequency."""
    return A4_FREQUENCY * 2.0 ** ((midi - A4_MIDI) / 12.0)


def midi_to_audible_frequency(midi: float) -> Optional[float]:
    """Like midi_to_frequency, but None when the result is not a positive finite number."""
    try:
        freq = midi_to_frequency(midi)
    except OverflowError:
        return None
    if not np.isfinite(freq) or freq <= 0:
        return None
    return freq


def note_name_to_midi(note_name: str) -> Optional[int]:
    """Parse a note name such as 'C#3' into a MIDI-style pitch number.

    Returns:
        The pitch number, or None if the name is not a sharp-only SPN note
    """
    if not isinstance(note_name, str):
        return None

    match = NOTE_PATTERN.match(note_name)
    if not match:
        logger.debug(f"Invalid note name: {note_name!r}")
        return None

    pitch_class, octave = match.groups()
    if pitch_class not in NOTE_NAMES:
        # E# and B# pass the pattern but are not pitch classes here
        logger.debug(f"Unknown pitch class in note name: {note_name!r}")
        return None

    return NOTE_NAMES.index(pitch_class) + (int(octave) + 1) * 12


def note_to_frequency(note_name: str) -> Optional[float]:
    """Convert a note name in Scientific Pitch Notation to a frequency.

    Args:
        note_name: The note name (e.g., 'A4', 'F#2')

    Returns:
        Frequency in Hz, or None if the note name is invalid or its
        frequency is not a positive finite number

    Examples:
        >>> note_to_frequency('A4')
        440.0
        >>> note_to_frequency('Bb3') is None
        True
    """
    midi = note_name_to_midi(note_name)
    if midi is None:
        return None

    freq = midi_to_audible_frequency(midi)
    if freq is None:
        logger.debug(f"Note out of range: {note_name!r}")
    return freq


def frequency_to_note(freq: float) -> Optional[NoteInfo]:
    """Find the nearest equal-temperament note for a frequency.

    Args:
        freq: Frequency in Hz

    Returns:
        NoteInfo with the note name, pitch number, signed cents offset and the
        note's exact frequency, or None if freq is not a positive finite number

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if freq is None or not np.isfinite(freq) or freq <= 0:
        return None

    midi = int(round(A4_MIDI + 12 * np.log2(freq / A4_FREQUENCY)))
    octave = midi // 12 - 1
    name = NOTE_NAMES[midi % 12]
    closest = midi_to_frequency(midi)

    return NoteInfo(
        name=f"{name}{octave}",
        midi=midi,
        cents=float(cents_between(freq, closest)),
        frequency=closest,
    )


def cents_between(freq: float, reference: float) -> float:
    """Signed distance from reference to freq in cents."""
    return float(1200 * np.log2(freq / reference))


def note_options(low_octave: int = 2, high_octave: int = 6) -> List[str]:
    """List every selectable note name between two octaves, inclusive."""
    return [
        f"{name}{octave}"
        for octave in range(low_octave, high_octave + 1)
        for name in NOTE_NAMES
    ]
