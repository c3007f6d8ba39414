"""Run shell commands concurrently under one shared deadline."""

__version__ = "1.0.0"
