"""Comments attached to texts."""
