"""Core world, entity and scheduling primitives."""
