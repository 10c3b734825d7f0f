"""HTTP API for the source tree viewer."""
