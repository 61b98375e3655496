# prompt_shortcuts/commands/service.py
"""Command operations exposed to the host application.

CommandService bundles the repository, resolver and listing helpers behind
the calls a request layer needs. It does not check permissions itself:
``can_edit`` and ``can_view`` return the decisions and the host enforces
them.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from prompt_shortcuts.commands.availability import (
    available_commands,
    editable_by,
    group_by_type,
    visible_to,
)
from prompt_shortcuts.commands.context import MembershipCheck, ProjectRef, UserRef
from prompt_shortcuts.commands.errors import ValidationError
from prompt_shortcuts.commands.models import Command, CommandType
from prompt_shortcuts.commands.parser import DEFAULT_PREFIX
from prompt_shortcuts.commands.repository import CommandRepository, get_repository
from prompt_shortcuts.commands.resolver import CommandResolver, ExpansionResult
from prompt_shortcuts.commands.schemas import CommandCreate, CommandSummary, CommandUpdate
from prompt_shortcuts.utils.logging import actor

logger = logging.getLogger(__name__)


def _never_member(user_id: str, project_id: str) -> bool:
    return False


class CommandService:
    """Facade over command storage, resolution and listing.

    Attributes:
        repository: CommandRepository holding the commands.
        resolver: CommandResolver used for expansion.

    Example:
        >>> service = CommandService(CommandRepository("data/commands.db"))
        >>> cmd = service.create(
        ...     CommandCreate(
        ...         name="summarize", prompt="Please summarize: {input}",
        ...         owner_user_id="u1",
        ...     )
        ... )
        >>> service.resolve_and_expand("/summarize test data", UserRef("u1")).text
        'Please summarize: test data'
    """

    def __init__(
        self,
        repository: CommandRepository,
        is_member: MembershipCheck = _never_member,
        clock: Callable[[], datetime] = datetime.now,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        """Initialize the CommandService.

        Args:
            repository: CommandRepository holding the commands.
            is_member: Host membership check used for visibility. The default
                treats nobody as a member, so project commands are hidden.
            clock: Source of the {datetime} value.
            prefix: Character that marks a shortcut invocation.
        """
        self.repository = repository
        self.resolver = CommandResolver(repository, clock=clock, prefix=prefix)
        self._is_member = is_member

    def resolve_and_expand(
        self, raw_text: str, user: UserRef, project: ProjectRef | None = None
    ) -> ExpansionResult:
        """Expand raw_text if it invokes a command visible in this context."""
        with actor(user.id):
            return self.resolver.resolve_and_expand(raw_text, user, project)

    def list_available(
        self,
        user: UserRef,
        project: ProjectRef | None = None,
        prefix: str | None = None,
    ) -> list[CommandSummary]:
        """List commands for autocomplete, filtered by an optional prefix."""
        project_id = project.id if project is not None else None
        return [
            CommandSummary(**entry)
            for entry in available_commands(
                self.repository, user.id, project_id, prefix
            )
        ]

    def list_grouped(
        self, user: UserRef, project: ProjectRef | None = None
    ) -> dict[CommandType, list[Command]]:
        """List commands for a management screen, grouped by type."""
        project_id = project.id if project is not None else None
        return group_by_type(self.repository.list_for(user.id, project_id))

    def get(self, command_id: int) -> Command:
        return self.repository.get(command_id)

    def create(self, attrs: CommandCreate) -> Command:
        """Create a command.

        Raises:
            ValidationError: With every violated rule.
        """
        cmd = Command(
            id=0,
            name=attrs.name,
            prompt=attrs.prompt,
            description=attrs.description,
            command_type=attrs.command_type,
            user_scope=attrs.user_scope,
            owner_user_id=attrs.owner_user_id,
            owner_project_id=attrs.owner_project_id,
        )
        with actor(attrs.owner_user_id):
            try:
                return self.repository.insert(cmd)
            except ValidationError as e:
                logger.info("Rejected command '%s': %s", attrs.name, e.fields)
                raise

    def update(self, command_id: int, attrs: CommandUpdate) -> Command:
        """Update the fields set on attrs.

        Raises:
            NotFoundError: If the command does not exist.
            ValidationError: With every violated rule.
        """
        try:
            return self.repository.update(command_id, attrs.changes())
        except ValidationError as e:
            logger.info("Rejected update of command id=%s: %s", command_id, e.fields)
            raise

    def delete(self, command_id: int) -> None:
        """Delete a command.

        Raises:
            NotFoundError: If the command does not exist.
        """
        self.repository.delete(command_id)

    def can_edit(self, command_id: int, user: UserRef | None) -> bool:
        """Check edit authority; raises NotFoundError for unknown ids."""
        return editable_by(self.repository.get(command_id), user)

    def can_view(self, command_id: int, user: UserRef | None) -> bool:
        """Check listing visibility; raises NotFoundError for unknown ids."""
        return visible_to(self.repository.get(command_id), user, self._is_member)


_service: CommandService | None = None


def get_service(is_member: MembershipCheck | None = None) -> CommandService:
    """Get the singleton CommandService built from application settings.

    Args:
        is_member: Host membership check (only used on first call). Without
            one, ``can_view`` denies every project command.

    Returns:
        CommandService singleton instance.
    """
    global _service
    if _service is None:
        from prompt_shortcuts.config import settings

        _service = CommandService(
            get_repository(settings.commands_db_path),
            is_member=is_member or _never_member,
            prefix=settings.command_prefix,
        )
    return _service
