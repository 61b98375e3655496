# prompt_shortcuts/commands/models.py
"""Command data model and its validation rules.

This module defines the Command dataclass, the scope enums that place a
command into one of the uniqueness partitions, and the self-contained
normalization/validation rules applied before every write.
"""

import json
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from prompt_shortcuts.commands.errors import FieldError

NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200
NAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")


class CommandType(str, Enum):
    """Visibility tier of a command."""

    GLOBAL = "global"
    PROJECT = "project"
    USER = "user"


class UserScope(str, Enum):
    """Scope of a personal (``user``) command."""

    COMMON = "common"
    PROJECT_LIMITED = "project_limited"


# Listing order for command types (global first, personal last)
TYPE_ORDER: dict[CommandType, int] = {
    CommandType.GLOBAL: 0,
    CommandType.PROJECT: 1,
    CommandType.USER: 2,
}


@dataclass
class Command:
    """Represents a custom command with its prompt template.

    A command stores a reusable prompt template that users invoke by typing
    ``/name``. The scope attributes decide who can resolve it and which
    partition its name must be unique within.

    Attributes:
        id: Unique identifier assigned by the database (0 before insert).
        name: Command name (lowercase normalized on write).
        prompt: Template text with optional {input}, {user_name},
            {project_name} and {datetime} placeholders.
        command_type: One of global, project, user.
        owner_user_id: Identifier of the user who owns the command.
        user_scope: common or project_limited (meaningful for user commands).
        owner_project_id: Project the command is scoped to, if any.
        description: Optional short text shown in listings.
        created_at: Timestamp when the command was created.
        updated_at: Timestamp when the command was last updated.

    Example:
        >>> cmd = Command(
        ...     id=0,
        ...     name="Summarize",
        ...     prompt="Please summarize: {input}",
        ...     command_type=CommandType.GLOBAL,
        ...     owner_user_id="u1",
        ... )
        >>> normalize(cmd).name
        'summarize'
    """

    id: int
    name: str
    prompt: str
    command_type: CommandType
    owner_user_id: str
    user_scope: UserScope = UserScope.COMMON
    owner_project_id: str | None = None
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def partition_key(self) -> str:
        """Key of the uniqueness partition this command's name lives in."""
        return partition_key(
            self.command_type,
            owner_user_id=self.owner_user_id,
            owner_project_id=self.owner_project_id,
            user_scope=self.user_scope,
        )


def partition_key(
    command_type: CommandType | str,
    owner_user_id: str | None = None,
    owner_project_id: str | None = None,
    user_scope: UserScope | str | None = None,
) -> str:
    """Build the partition key for a command scope.

    Only the attributes that define the partition take part in the key, so a
    global command owned by one user collides with a global command owned by
    another, while personal commands of different users never collide. The
    parts are JSON-encoded so ids containing separators such as ``:`` cannot
    make two partitions share a key.

    Args:
        command_type: Tier of the command.
        owner_user_id: Owning user (used for user commands).
        owner_project_id: Owning project (used for project and
            project_limited user commands).
        user_scope: Scope of a user command.

    Returns:
        Key such as ``'["global"]'``, ``'["project", "7"]'``,
        ``'["user", "u1", "common"]'`` or
        ``'["user", "u1", "project_limited", "7"]'``.

    Raises:
        ValueError: If command_type or user_scope is not a known value.
    """
    command_type = CommandType(command_type)
    if command_type is CommandType.GLOBAL:
        parts = [command_type.value]
    elif command_type is CommandType.PROJECT:
        parts = [command_type.value, owner_project_id]
    else:
        scope = UserScope(user_scope or UserScope.COMMON)
        parts = [command_type.value, owner_user_id, scope.value]
        if scope is UserScope.PROJECT_LIMITED:
            parts.append(owner_project_id)
    return json.dumps(parts)


def _coerce(enum_cls: type[Enum], value: object) -> object:
    try:
        return enum_cls(value)
    except ValueError:
        # Left as-is so validate() can report it
        return value


def normalize(cmd: Command) -> Command:
    """Return a copy of the command ready for validation and storage.

    The name is lowercased only when it already matches ``NAME_PATTERN``, so
    padded or non-ASCII input (e.g. the Kelvin sign, which lowercases to
    "k") reaches validate() unchanged and is rejected. Enum fields given as
    plain strings are converted, and an empty project id becomes None.
    """
    name = cmd.name
    if isinstance(name, str) and NAME_PATTERN.fullmatch(name):
        name = name.lower()
    project_id = cmd.owner_project_id
    if isinstance(project_id, str) and not project_id.strip():
        project_id = None
    return replace(
        cmd,
        name=name,
        command_type=_coerce(CommandType, cmd.command_type),
        user_scope=_coerce(UserScope, cmd.user_scope or UserScope.COMMON),
        owner_project_id=project_id,
    )


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate(cmd: Command) -> list[FieldError]:
    """Check a command against every field and scope rule.

    Uniqueness is not checked here since it needs the store; see
    ``CommandRepository``. All violations are collected.

    Args:
        cmd: Command to check (normally already normalized).

    Returns:
        List of violations, empty when the command is valid.
    """
    errors: list[FieldError] = []

    if _blank(cmd.name):
        errors.append(FieldError("name", "cannot be blank"))
    else:
        if len(cmd.name) > NAME_MAX_LENGTH:
            errors.append(
                FieldError(
                    "name", f"is too long (maximum is {NAME_MAX_LENGTH} characters)"
                )
            )
        if not NAME_PATTERN.fullmatch(cmd.name):
            errors.append(
                FieldError("name", "may only contain letters, digits, '_' and '-'")
            )

    if _blank(cmd.prompt):
        errors.append(FieldError("prompt", "cannot be blank"))

    if cmd.description is not None and len(cmd.description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            FieldError(
                "description",
                f"is too long (maximum is {DESCRIPTION_MAX_LENGTH} characters)",
            )
        )

    if _blank(cmd.owner_user_id):
        errors.append(FieldError("owner_user_id", "is required"))

    command_type: CommandType | None = None
    try:
        command_type = CommandType(cmd.command_type)
    except ValueError:
        errors.append(FieldError("command_type", "is not included in the list"))

    user_scope: UserScope | None = None
    try:
        user_scope = UserScope(cmd.user_scope)
    except ValueError:
        errors.append(FieldError("user_scope", "is not included in the list"))

    # Scope rules below only run for the enum values they depend on
    has_project = not _blank(cmd.owner_project_id)
    if command_type is CommandType.PROJECT and not has_project:
        errors.append(
            FieldError("owner_project_id", "is required for project commands")
        )
    elif command_type is CommandType.GLOBAL and has_project:
        errors.append(
            FieldError("owner_project_id", "must be blank for global commands")
        )
    elif command_type is CommandType.USER:
        if user_scope is UserScope.PROJECT_LIMITED and not has_project:
            errors.append(
                FieldError(
                    "owner_project_id",
                    "is required for project-limited user commands",
                )
            )
        elif user_scope is UserScope.COMMON and has_project:
            errors.append(
                FieldError(
                    "owner_project_id", "must be blank for common user commands"
                )
            )

    return errors
