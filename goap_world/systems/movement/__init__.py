"""Movement helpers and system."""
