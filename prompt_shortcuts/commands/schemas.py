# prompt_shortcuts/commands/schemas.py
"""Pydantic models for command payloads exchanged with the host.

Fields are typed loosely on purpose: the command rules in ``models.validate``
check them, so every violation is reported together instead of stopping at
the first type error.
"""

from pydantic import BaseModel, Field

from prompt_shortcuts.commands.models import CommandType, UserScope


class CommandCreate(BaseModel):
    """Attributes for creating a command.

    Attributes:
        name: Command name (will be normalized to lowercase).
        prompt: Prompt template with optional placeholders.
        command_type: global, project or user.
        owner_user_id: Identifier of the creating user.
        user_scope: common or project_limited (user commands).
        owner_project_id: Project for project and project_limited commands.
        description: Optional listing text.
    """

    name: str = Field("", description="Command name")
    prompt: str = Field(
        "",
        description="Prompt template with optional {input}, {user_name}, "
        "{project_name} and {datetime}",
    )
    command_type: CommandType | str = Field(
        CommandType.GLOBAL, description="global, project or user"
    )
    owner_user_id: str = Field(..., description="Owning user identifier")
    user_scope: UserScope | str = Field(
        UserScope.COMMON, description="common or project_limited"
    )
    owner_project_id: str | None = Field(None, description="Owning project")
    description: str | None = Field(None, description="Listing description")


class CommandUpdate(BaseModel):
    """Attributes for updating a command; unset fields are left unchanged."""

    name: str | None = None
    prompt: str | None = None
    command_type: CommandType | str | None = None
    user_scope: UserScope | str | None = None
    owner_project_id: str | None = None
    description: str | None = None

    def changes(self) -> dict:
        """Return only the fields the caller explicitly set."""
        return self.model_dump(exclude_unset=True)


class CommandSummary(BaseModel):
    """Entry in an autocomplete listing."""

    name: str = Field(..., description="Command name")
    description: str | None = Field(None, description="Listing description")
