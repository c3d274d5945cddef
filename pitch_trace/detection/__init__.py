"""Per-frame pitch post-processing: smoothing and tuning classification."""
