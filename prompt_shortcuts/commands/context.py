"""Caller context consumed by the command module.

Users and projects are owned by the host application; only the fields the
command module reads are modelled here.
"""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class UserRef:
    """The acting user.

    Attributes:
        id: User identifier.
        display_name: Name substituted for {user_name}.
        is_admin: Administrators may edit any command.
    """

    id: str
    display_name: str = ""
    is_admin: bool = False


@dataclass(frozen=True)
class ProjectRef:
    """The project in context, if any.

    Attributes:
        id: Project identifier.
        display_name: Name substituted for {project_name}.
    """

    id: str
    display_name: str = ""


# (user_id, project_id) -> whether the user is a member of the project
MembershipCheck = Callable[[str, str], bool]
