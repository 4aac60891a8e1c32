"""HTTP API for the try-on studio."""
