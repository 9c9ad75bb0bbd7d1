"""HTTP API for the ventboard application."""
