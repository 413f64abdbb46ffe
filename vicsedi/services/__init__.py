"""Service layer: transport-agnostic document operations."""
