"""Tuner tools — auto-discovered by tools.registry.ToolRegistry."""
