"""Command-line interface and configuration."""
