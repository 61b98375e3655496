# prompt_shortcuts/commands/resolver.py
"""Command resolver for turning shortcut invocations into prompts.

This module provides the CommandResolver class which detects a shortcut in a
message, picks the single applicable command by scope priority and expands
its prompt template.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from prompt_shortcuts.commands.context import ProjectRef, UserRef
from prompt_shortcuts.commands.models import (
    NAME_PATTERN,
    Command,
    CommandType,
    UserScope,
)
from prompt_shortcuts.commands.parser import DEFAULT_PREFIX, parse_command
from prompt_shortcuts.commands.prompts import expand_prompt
from prompt_shortcuts.commands.repository import CommandRepository

logger = logging.getLogger(__name__)


@dataclass
class ExpansionResult:
    """Outcome of resolving a message.

    Attributes:
        expanded: True when a command matched and its prompt replaced the text.
        text: The expanded prompt, or the original message when not expanded.
        matched_command_id: Id of the command used, if any.
    """

    expanded: bool
    text: str
    matched_command_id: int | None = None


class CommandResolver:
    """Resolver for shortcut invocations.

    Lookup order, first hit wins:

    1. the user's commands limited to the current project
    2. the user's common commands
    3. the current project's commands
    4. global commands

    Tiers 1 and 3 are skipped when no project is in context. The resolver
    keeps no state between calls and never writes to the repository.

    Attributes:
        repository: CommandRepository for command lookup.

    Example:
        >>> repo = CommandRepository(db_path="data/commands.db")
        >>> resolver = CommandResolver(repository=repo)
        >>> result = resolver.resolve_and_expand("/summarize test data", UserRef("u1"))
        >>> result.expanded, result.text
        (True, 'Please summarize: test data')
    """

    def __init__(
        self,
        repository: CommandRepository,
        clock: Callable[[], datetime] = datetime.now,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        """Initialize the CommandResolver.

        Args:
            repository: CommandRepository for command lookup.
            clock: Source of the {datetime} value.
            prefix: Character that marks a shortcut invocation.
        """
        self.repository = repository
        self._clock = clock
        self.prefix = prefix

    def find_command(
        self, name: str, user_id: str, project_id: str | None = None
    ) -> Command | None:
        """Find the command a user gets for a name in the given context.

        Args:
            name: Shortcut name (case-insensitive).
            user_id: Acting user.
            project_id: Current project, if any.

        Returns:
            The highest-priority matching command, or None.
        """
        name = name.lower()
        repo = self.repository

        if project_id is not None:
            cmd = repo.find_by_scope(
                CommandType.USER,
                name,
                owner_user_id=user_id,
                owner_project_id=project_id,
                user_scope=UserScope.PROJECT_LIMITED,
            )
            if cmd is not None:
                return cmd

        cmd = repo.find_by_scope(
            CommandType.USER, name, owner_user_id=user_id, user_scope=UserScope.COMMON
        )
        if cmd is not None:
            return cmd

        if project_id is not None:
            cmd = repo.find_by_scope(
                CommandType.PROJECT, name, owner_project_id=project_id
            )
            if cmd is not None:
                return cmd

        return repo.find_by_scope(CommandType.GLOBAL, name)

    def resolve_and_expand(
        self, raw_text: str, user: UserRef, project: ProjectRef | None = None
    ) -> ExpansionResult:
        """Expand a message if it invokes a known command.

        A miss is a normal outcome: the original text is returned with
        ``expanded=False``.

        Args:
            raw_text: Message as typed by the user.
            user: Acting user.
            project: Current project, if any.

        Returns:
            ExpansionResult with the final text.
        """
        parsed = parse_command(raw_text, self.prefix)
        if parsed is None:
            return ExpansionResult(expanded=False, text=raw_text)

        if not NAME_PATTERN.fullmatch(parsed.name):
            logger.debug("Not a valid command name: %r", parsed.name)
            return ExpansionResult(expanded=False, text=raw_text)

        project_id = project.id if project is not None else None
        cmd = self.find_command(parsed.name, user.id, project_id)
        if cmd is None:
            logger.debug("No command '%s' for user %s", parsed.name, user.id)
            return ExpansionResult(expanded=False, text=raw_text)

        text = expand_prompt(
            cmd,
            parsed.input,
            user.display_name,
            project.display_name if project is not None else None,
            self._clock(),
        )
        logger.debug(
            "Expanded '%s' with command id=%s (%s)",
            parsed.name,
            cmd.id,
            cmd.partition_key,
        )
        return ExpansionResult(expanded=True, text=text, matched_command_id=cmd.id)
