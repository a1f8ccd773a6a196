"""Core record types and pure helpers (no I/O)."""
