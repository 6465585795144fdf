"""Per-tick systems."""
