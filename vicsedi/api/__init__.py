"""HTTP API for document generation and validation."""
