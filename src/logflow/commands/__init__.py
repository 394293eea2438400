"""CLI commands for logflow."""
