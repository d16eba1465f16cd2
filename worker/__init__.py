"""Background worker module."""
