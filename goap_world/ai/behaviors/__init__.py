"""Concrete actions used by the demo world."""
