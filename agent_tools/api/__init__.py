"""HTTP API for direct tool access."""
