"""Domain types and pure helpers (no database or transport imports)."""
