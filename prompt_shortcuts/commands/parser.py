"""Pure function-based command parser for detecting shortcuts in text."""

from dataclasses import dataclass

DEFAULT_PREFIX = "/"


@dataclass
class ParsedCommand:
    """Represents a parsed shortcut invocation.

    Attributes:
        name: The shortcut name (lowercase normalized).
        input: Text typed after the name, with internal newlines preserved.
    """

    name: str
    input: str = ""


def is_command(text: str, prefix: str = DEFAULT_PREFIX) -> bool:
    """Check whether text is a shortcut invocation.

    Leading whitespace is ignored; the prefix must come first.

    Examples:
        >>> is_command("  /summarize")
        True
        >>> is_command("this is a /test")
        False
    """
    return text.lstrip().startswith(prefix)


def parse_command(text: str, prefix: str = DEFAULT_PREFIX) -> ParsedCommand | None:
    """Parse a shortcut invocation from text.

    Detects text in the format ``/name input text`` and splits it into the
    name (everything after the prefix up to the first whitespace) and the
    input. The whitespace separating the two is dropped and the input is
    trimmed at both ends, but its internal text, newlines included, is kept
    exactly as typed.

    Args:
        text: The text to parse.
        prefix: Shortcut prefix character.

    Returns:
        ParsedCommand if text is an invocation with a name, otherwise None.

    Examples:
        >>> parse_command("/summarize some text")
        ParsedCommand(name='summarize', input='some text')

        >>> parse_command("/SUMMARIZE line1\\nline2")
        ParsedCommand(name='summarize', input='line1\\nline2')

        >>> parse_command("/help")
        ParsedCommand(name='help', input='')

        >>> parse_command("plain message")
        None

        >>> parse_command("/")
        None
    """
    if not is_command(text, prefix):
        return None

    body = text.lstrip()[len(prefix) :]

    parts = body.split(None, 1)
    if not parts or body[0].isspace():
        return None

    command_name = parts[0].lower()
    command_input = parts[1].strip() if len(parts) > 1 else ""

    return ParsedCommand(name=command_name, input=command_input)
