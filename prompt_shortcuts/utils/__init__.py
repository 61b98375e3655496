# prompt_shortcuts/utils/__init__.py
"""Utility functions for the prompt shortcuts package."""

from prompt_shortcuts.utils.logging import (
    StructuredFormatter,
    actor,
    configure_structured_logging,
    get_actor,
)

__all__ = [
    "StructuredFormatter",
    "actor",
    "get_actor",
    "configure_structured_logging",
]
