"""Target frequency sets built from single notes or scale templates."""

from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from .logger import get_logger
from .note_types import ScaleTarget, SingleNoteTarget, TargetSpec
from .note_utils import midi_to_audible_frequency, note_name_to_midi, note_to_frequency

logger = get_logger(__name__)

# Semitone offsets from the tonic, always ending at the octave
INTERVAL_TEMPLATES: Mapping[str, Tuple[int, ...]] = MappingProxyType(
    {
        "major": (0, 2, 4, 5, 7, 9, 11, 12),
        "natural_minor": (0, 2, 3, 5, 7, 8, 10, 12),
        "harmonic_minor": (0, 2, 3, 5, 7, 8, 11, 12),
        "melodic_minor": (0, 2, 3, 5, 7, 9, 11, 12),
        "major_pentatonic": (0, 2, 4, 7, 9, 12),
        "minor_pentatonic": (0, 3, 5, 7, 10, 12),
        "blues": (0, 3, 5, 6, 7, 10, 12),
    }
)

# Named two-octave practice scales
SCALE_PRESETS: Mapping[str, ScaleTarget] = MappingProxyType(
    {
        "C_major": ScaleTarget("C3", "major", octaves=2),
        "G_major": ScaleTarget("G2", "major", octaves=2),
        "D_major": ScaleTarget("D3", "major", octaves=2),
        "A_minor": ScaleTarget("A2", "natural_minor", octaves=2),
        "E_minor": ScaleTarget("E2", "natural_minor", octaves=2),
        "Pentatonic_C": ScaleTarget("C3", "major_pentatonic", octaves=2),
    }
)


def scale_offsets(template: str, octaves: int = 1) -> Optional[List[int]]:
    """Expand an interval template over one or more octaves.

    Returns:
        Semitone offsets from the tonic, or None for an unknown template
    """
    intervals = INTERVAL_TEMPLATES.get(template)
    if intervals is None:
        return None

    offsets = list(intervals)
    for octave in range(1, octaves):
        offsets.extend(offset + 12 * octave for offset in intervals[1:])
    return offsets


def build_targets(spec: Optional[TargetSpec]) -> List[float]:
    """Convert a target specification into an ordered list of frequencies.

    Args:
        spec: A SingleNoteTarget or ScaleTarget

    Returns:
        Target frequencies in Hz, empty when nothing valid is selected
    """
    if spec is None:
        return []

    if isinstance(spec, SingleNoteTarget):
        freq = note_to_frequency(spec.note)
        if freq is None:
            logger.warning(f"Invalid target note: {spec.note!r}")
            return []
        return [freq]

    if isinstance(spec, ScaleTarget):
        tonic = note_name_to_midi(spec.tonic)
        if tonic is None:
            logger.warning(f"Invalid scale tonic: {spec.tonic!r}")
            return []

        offsets = scale_offsets(spec.template, max(1, spec.octaves))
        if offsets is None:
            logger.warning(f"Unknown interval template: {spec.template!r}")
            return []

        frequencies = [midi_to_audible_frequency(tonic + offset) for offset in offsets]
        return [f for f in frequencies if f is not None]

    raise TypeError(f"Unsupported target specification: {spec!r}")


def nearest_target(freq: float, targets: Sequence[float]) -> Optional[float]:
    """Return the target closest to freq in Hz; the first one wins a tie."""
    if not targets:
        return None

    nearest = targets[0]
    min_distance = abs(targets[0] - freq)
    for target in targets[1:]:
        distance = abs(target - freq)
        if distance < min_distance:
            min_distance = distance
            nearest = target
    return nearest
