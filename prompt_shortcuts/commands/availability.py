"""Command listing for autocomplete and display checks.

Unlike resolution, listing does not collapse commands that share a name
across tiers: every option the user could type is returned.
"""

from prompt_shortcuts.commands.context import MembershipCheck, UserRef
from prompt_shortcuts.commands.models import TYPE_ORDER, Command, CommandType
from prompt_shortcuts.commands.repository import CommandRepository


def _sort_key(cmd: Command) -> tuple[int, str]:
    return TYPE_ORDER[cmd.command_type], cmd.name


def available_commands(
    repository: CommandRepository,
    user_id: str,
    project_id: str | None = None,
    prefix: str | None = None,
) -> list[dict[str, str | None]]:
    """List the commands a user may reference in the given context.

    Args:
        repository: CommandRepository to read from.
        user_id: Acting user.
        project_id: Current project, if any.
        prefix: Optional name prefix (case-insensitive).

    Returns:
        ``{"name", "description"}`` dicts sorted by command type
        (global, project, user) then name.
    """
    commands = repository.list_for(user_id, project_id)

    if prefix:
        needle = prefix.lower()
        commands = [c for c in commands if c.name.lower().startswith(needle)]

    return [
        {"name": c.name, "description": c.description}
        for c in sorted(commands, key=_sort_key)
    ]


def group_by_type(commands: list[Command]) -> dict[CommandType, list[Command]]:
    """Group commands by type for listing screens.

    Groups appear in type order and are sorted by name; empty types are
    omitted.
    """
    grouped: dict[CommandType, list[Command]] = {}
    for cmd in sorted(commands, key=_sort_key):
        grouped.setdefault(cmd.command_type, []).append(cmd)
    return grouped


def visible_to(
    command: Command,
    user: UserRef | None,
    is_member: MembershipCheck,
) -> bool:
    """Check whether a user may see a command in listings.

    Global commands are visible to everyone, project commands to members of
    their project, user commands only to their owner. This is broader than
    resolution, which only considers the active project.

    Args:
        command: Command to check.
        user: Viewing user, or None for an anonymous caller.
        is_member: Membership check supplied by the host.
    """
    if user is None:
        return False

    if command.command_type is CommandType.GLOBAL:
        return True
    if command.command_type is CommandType.PROJECT:
        return command.owner_project_id is not None and is_member(
            user.id, command.owner_project_id
        )
    if command.command_type is CommandType.USER:
        return command.owner_user_id == user.id
    return False


def editable_by(command: Command, user: UserRef | None) -> bool:
    """Check whether a user may update or delete a command.

    True for administrators and for the command's owner.
    """
    if user is None:
        return False
    return user.is_admin or command.owner_user_id == user.id
