"""Plan execution systems."""
