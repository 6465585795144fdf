"""Goal-oriented action planning for simulated agents."""

__version__ = "0.1.0"
