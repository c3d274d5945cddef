"""Audio analysis and device adapters."""
