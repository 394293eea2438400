"""Real-time terminal log viewer."""
