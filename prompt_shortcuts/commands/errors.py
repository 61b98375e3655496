"""Exceptions raised by the command store."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single violated rule on a command field.

    Attributes:
        field: Name of the offending attribute (e.g. "name", "owner_project_id").
        message: Human-readable reason.
    """

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field} {self.message}"


class CommandError(Exception):
    """Base class for command store errors."""


class ValidationError(CommandError):
    """Raised when a create or update violates one or more command rules.

    Carries every violation found, not just the first one, so callers can
    render all field-level messages in a single round trip.
    """

    def __init__(self, errors: list[FieldError]):
        super().__init__("; ".join(str(e) for e in errors))
        self.errors = list(errors)

    @property
    def fields(self) -> list[str]:
        """Names of the fields with at least one violation, in order."""
        seen: list[str] = []
        for error in self.errors:
            if error.field not in seen:
                seen.append(error.field)
        return seen

    def messages_for(self, field: str) -> list[str]:
        return [e.message for e in self.errors if e.field == field]


class NotFoundError(CommandError):
    """Raised when an operation references a command id that does not exist."""

    def __init__(self, command_id: int):
        super().__init__(f"No command found with id: {command_id}")
        self.command_id = command_id
