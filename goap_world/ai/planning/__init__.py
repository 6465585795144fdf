"""State-space action planner."""
