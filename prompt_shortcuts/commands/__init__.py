"""Command module for scoped custom command management and expansion.

This module provides:
- Command: Data model for storing custom commands
- CommandRepository: SQLite repository with partitioned name uniqueness
- ParsedCommand / parse_command: Shortcut detection and parsing
- expand_prompt: Placeholder substitution for a resolved command
- CommandResolver: Priority-based lookup and expansion
- available_commands / visible_to / editable_by: Listing and predicates
- CommandService: Facade used by the host application
"""

from prompt_shortcuts.commands.availability import (
    available_commands,
    editable_by,
    group_by_type,
    visible_to,
)
from prompt_shortcuts.commands.context import ProjectRef, UserRef
from prompt_shortcuts.commands.errors import (
    CommandError,
    FieldError,
    NotFoundError,
    ValidationError,
)
from prompt_shortcuts.commands.models import Command, CommandType, UserScope
from prompt_shortcuts.commands.parser import ParsedCommand, is_command, parse_command
from prompt_shortcuts.commands.prompts import expand_prompt
from prompt_shortcuts.commands.repository import CommandRepository, get_repository
from prompt_shortcuts.commands.resolver import CommandResolver, ExpansionResult
from prompt_shortcuts.commands.schemas import (
    CommandCreate,
    CommandSummary,
    CommandUpdate,
)
from prompt_shortcuts.commands.service import CommandService, get_service

__all__ = [
    "Command",
    "CommandType",
    "UserScope",
    "CommandRepository",
    "get_repository",
    "ParsedCommand",
    "is_command",
    "parse_command",
    "expand_prompt",
    "CommandResolver",
    "ExpansionResult",
    "available_commands",
    "group_by_type",
    "visible_to",
    "editable_by",
    "UserRef",
    "ProjectRef",
    "CommandError",
    "FieldError",
    "NotFoundError",
    "ValidationError",
    "CommandCreate",
    "CommandUpdate",
    "CommandSummary",
    "CommandService",
    "get_service",
]
