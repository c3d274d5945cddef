"""Fixed-size frame reading from audio files for offline analysis."""

from typing import Iterator, Tuple

import numpy as np
import soundfile as sf

from ..logger import get_logger

logger = get_logger(__name__)


def read_sample_rate(path: str) -> int:
    return sf.info(path).samplerate


def iter_wav_frames(path: str, frame_size: int = 2048) -> Iterator[Tuple[int, np.ndarray]]:
    """Yield (frame_index, mono_frame) pairs from an audio file.

    Only the first channel is used. The final frame is zero padded to
    `frame_size` so every frame has the same length.
    """
    if frame_size <= 0:
        raise ValueError("frame_size must be positive")

    logger.info(f"Reading {path} in frames of {frame_size} samples")
    blocks = sf.blocks(path, blocksize=frame_size, dtype="float32", always_2d=True)
    for index, block in enumerate(blocks):
        frame = block[:, 0]
        if frame.size < frame_size:
            frame = np.pad(frame, (0, frame_size - frame.size))
        yield index, frame
