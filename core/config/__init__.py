"""Engine configuration helpers."""
