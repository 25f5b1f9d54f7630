"""Domain layer (no I/O)."""
