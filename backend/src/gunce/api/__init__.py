"""HTTP API for the diary."""
