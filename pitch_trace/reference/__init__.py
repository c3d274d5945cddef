"""Reference tone scheduling and latency-compensated playback history."""
