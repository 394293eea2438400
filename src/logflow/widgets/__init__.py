"""Textual widgets for logflow."""
