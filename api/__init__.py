"""HTTP API for the Glow List waitlist."""
