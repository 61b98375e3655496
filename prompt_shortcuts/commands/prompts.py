# prompt_shortcuts/commands/prompts.py
"""Prompt expansion for resolved commands.

Substitutes the four supported placeholders in a command's prompt template.
Replacement is a single pass over the template: text inserted for one
placeholder is never scanned again, so user input such as "{user_name}"
stays inert.
"""

import re
from datetime import datetime

from prompt_shortcuts.commands.models import Command

PLACEHOLDERS = ("input", "user_name", "project_name", "datetime")

_PLACEHOLDER_RE = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")


def format_datetime(value: datetime) -> str:
    """Format a timestamp as ``YYYY-MM-DD HH:MM:SS``.

    Built from the numeric fields directly so the output does not depend on
    the process locale.
    """
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


def expand_template(template: str, values: dict[str, str]) -> str:
    """Replace known placeholders in one pass.

    Unknown placeholder-like sequences (e.g. ``{foo}``) are left untouched.
    """
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)


def expand_prompt(
    command: Command,
    user_input: str,
    user_name: str,
    project_name: str | None,
    timestamp: datetime,
) -> str:
    """Build the final prompt text for a resolved command.

    Args:
        command: Command whose prompt template is expanded.
        user_input: Text typed after the shortcut name.
        user_name: Display name of the acting user.
        project_name: Display name of the current project, or None.
        timestamp: Value for {datetime}.

    Returns:
        The expanded prompt.

    Example:
        >>> cmd = Command(
        ...     id=1, name="summarize", prompt="Please summarize: {input}",
        ...     command_type="global", owner_user_id="u1",
        ... )
        >>> expand_prompt(cmd, "hello {user_name}", "Alice", None, datetime.now())
        'Please summarize: hello {user_name}'
    """
    return expand_template(
        command.prompt,
        {
            "input": user_input,
            "user_name": user_name or "",
            "project_name": project_name or "",
            "datetime": format_datetime(timestamp),
        },
    )
