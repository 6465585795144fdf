"""Planning, goals and sample behaviours."""
