# tests/conftest.py
"""Shared pytest fixtures for all test modules.

Provides common fixtures for:
- Temporary database paths
- A repository with a fixed clock
- Users and projects used across scenarios
"""

import os
import tempfile
from collections.abc import Callable, Generator
from datetime import datetime

import pytest

from prompt_shortcuts.commands.context import ProjectRef, UserRef
from prompt_shortcuts.commands.models import Command, CommandType, UserScope
from prompt_shortcuts.commands.repository import CommandRepository

FIXED_NOW = datetime(2026, 2, 1, 9, 30, 15)


@pytest.fixture
def temp_db() -> Generator[str, None, None]:
    """Create a temporary database file path.

    Yields:
        Path to temporary SQLite database file.
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup, including WAL side files
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def repo(temp_db: str, clock) -> CommandRepository:
    """Empty repository on a temporary database."""
    return CommandRepository(db_path=temp_db, clock=clock)


@pytest.fixture
def alice() -> UserRef:
    return UserRef(id="u1", display_name="Alice")


@pytest.fixture
def bob() -> UserRef:
    return UserRef(id="u2", display_name="Bob")


@pytest.fixture
def admin() -> UserRef:
    return UserRef(id="u9", display_name="Admin", is_admin=True)


@pytest.fixture
def project() -> ProjectRef:
    return ProjectRef(id="p1", display_name="Apollo")


@pytest.fixture
def other_project() -> ProjectRef:
    return ProjectRef(id="p2", display_name="Gemini")


def _make_command(
    name: str = "summarize",
    prompt: str = "Please summarize: {input}",
    command_type: CommandType | str = CommandType.GLOBAL,
    owner_user_id: str = "u1",
    user_scope: UserScope | str = UserScope.COMMON,
    owner_project_id: str | None = None,
    description: str | None = None,
) -> Command:
    """Build an unsaved Command with sensible defaults."""
    return Command(
        id=0,
        name=name,
        prompt=prompt,
        command_type=command_type,
        owner_user_id=owner_user_id,
        user_scope=user_scope,
        owner_project_id=owner_project_id,
        description=description,
    )


@pytest.fixture
def make_command() -> Callable[..., Command]:
    """Factory for unsaved commands."""
    return _make_command
