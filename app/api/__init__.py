"""HTTP bridge for the UI."""
