"""Core of a small AI agent: configuration, paths, memory, prompt context, message bus and chat provider."""

__version__ = "0.1.0"