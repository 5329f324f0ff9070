"""Notes backend: HTTP API, note service, persistence and configuration."""
