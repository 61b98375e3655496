"""Prompt shortcuts: scoped custom commands that expand into prompt text."""

__version__ = "0.1.0"
