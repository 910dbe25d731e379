"""Employee records REST API."""
