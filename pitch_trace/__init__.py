"""Pitch Trace - real-time pitch tracing against musical targets."""

__version__ = "0.1.0"
