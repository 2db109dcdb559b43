"""HTTP API for Hajari."""
