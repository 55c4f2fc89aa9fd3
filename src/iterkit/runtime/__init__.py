"""Runtime services for iterkit (observability)."""
