"""Core components for the Pitch Trace application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioInput,
    IScheduler,
    IToneOutput,
)

__all__ = ["IAudioInput", "IScheduler", "IToneOutput"]
