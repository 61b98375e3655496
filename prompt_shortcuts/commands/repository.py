# prompt_shortcuts/commands/repository.py
"""SQLite repository for Command persistence.

This module provides CRUD operations and scope lookups for commands using
direct sqlite3. Name uniqueness is enforced per partition: every row stores
its partition key, and the uniqueness check and write for a mutation run in a
single ``BEGIN IMMEDIATE`` transaction backed by a UNIQUE index on
``(partition_key, name)``.
"""

import logging
import os
import sqlite3
from collections.abc import Callable
from dataclasses import fields, replace
from datetime import datetime
from typing import Any

from prompt_shortcuts.commands.errors import FieldError, NotFoundError, ValidationError
from prompt_shortcuts.commands.models import (
    Command,
    CommandType,
    UserScope,
    normalize,
    partition_key,
    validate,
)

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, prompt, description, command_type, user_scope, "
    "owner_user_id, owner_project_id, created_at, updated_at"
)

# Fields an update may change; id and timestamps are managed by the store
UPDATABLE_FIELDS = frozenset(
    f.name for f in fields(Command) if f.name not in ("id", "created_at", "updated_at")
)

NAME_TAKEN = "has already been taken"


class CommandRepository:
    """Repository for storing and retrieving commands from SQLite.

    The repository auto-creates the database directory and table on
    initialization. Each operation opens its own connection, so one instance
    can be shared between threads.

    Attributes:
        db_path: Path to the SQLite database file.

    Example:
        >>> repo = CommandRepository(db_path="data/commands.db")
        >>> created = repo.insert(
        ...     Command(
        ...         id=0, name="Summarize", prompt="Please summarize: {input}",
        ...         command_type=CommandType.GLOBAL, owner_user_id="u1",
        ...     )
        ... )
        >>> created.name
        'summarize'
    """

    def __init__(
        self,
        db_path: str = "data/commands.db",
        clock: Callable[[], datetime] = datetime.now,
        timeout: float = 5.0,
    ) -> None:
        """Initialize the CommandRepository.

        Args:
            db_path: Path to the SQLite database file.
            clock: Source of created_at/updated_at timestamps.
            timeout: Seconds a writer waits for another writer's lock.
        """
        self.db_path = db_path
        self._clock = clock
        self._timeout = timeout

        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode: transactions are opened explicitly
        return sqlite3.connect(
            self.db_path, timeout=self._timeout, isolation_level=None
        )

    def _init_db(self) -> None:
        """Create the commands table and indexes if they don't exist."""
        conn = self._connect()
        try:
            conn.execute("PRAGMA journal_mode=WAL")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS commands (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    prompt TEXT NOT NULL,
                    description TEXT,
                    command_type TEXT NOT NULL,
                    user_scope TEXT NOT NULL,
                    owner_user_id TEXT NOT NULL,
                    owner_project_id TEXT,
                    partition_key TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_commands_partition_name
                ON commands(partition_key, name)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_commands_owner_user
                ON commands(owner_user_id)
            """)
        finally:
            conn.close()

    def _row_to_command(self, row: tuple) -> Command:
        """Convert a database row (in ``_COLUMNS`` order) to a Command."""
        return Command(
            id=row[0],
            name=row[1],
            prompt=row[2],
            description=row[3],
            command_type=CommandType(row[4]),
            user_scope=UserScope(row[5]),
            owner_user_id=row[6],
            owner_project_id=row[7],
            created_at=datetime.fromisoformat(row[8]),
            updated_at=datetime.fromisoformat(row[9]),
        )

    def _fetch(self, conn: sqlite3.Connection, command_id: int) -> Command | None:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM commands WHERE id = ?", (command_id,)
        ).fetchone()
        return self._row_to_command(row) if row else None

    def _check(self, conn: sqlite3.Connection, cmd: Command) -> list[FieldError]:
        """Validate a normalized command, including partitioned uniqueness.

        Must run inside the write transaction so the check and the write
        cannot interleave with another writer.
        """
        errors = validate(cmd)

        # Uniqueness is only meaningful for a well-formed name and scope
        if any(e.field in ("name", "command_type", "user_scope") for e in errors):
            return errors

        row = conn.execute(
            "SELECT 1 FROM commands WHERE partition_key = ? AND name = ? AND id != ?",
            (cmd.partition_key, cmd.name, cmd.id or 0),
        ).fetchone()
        if row is not None:
            errors.insert(0, FieldError("name", NAME_TAKEN))
        return errors

    def insert(self, cmd: Command) -> Command:
        """Validate and store a new command.

        The command name is normalized to lowercase before any check.

        Args:
            cmd: Command to create. The id and timestamp fields are ignored
                and assigned by the store.

        Returns:
            The stored Command with its database-assigned id.

        Raises:
            ValidationError: With every violated rule, including a taken name.
        """
        now = self._clock()
        cmd = replace(normalize(cmd), id=0, created_at=now, updated_at=now)

        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                errors = self._check(conn, cmd)
                if errors:
                    raise ValidationError(errors)

                cursor = conn.execute(
                    """
                    INSERT INTO commands (
                        name, prompt, description, command_type, user_scope,
                        owner_user_id, owner_project_id, partition_key,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        cmd.name,
                        cmd.prompt,
                        cmd.description,
                        cmd.command_type.value,
                        cmd.user_scope.value,
                        cmd.owner_user_id,
                        cmd.owner_project_id,
                        cmd.partition_key,
                        cmd.created_at.isoformat(),
                        cmd.updated_at.isoformat(),
                    ),
                )
                new_id = cursor.lastrowid
                conn.execute("COMMIT")
            except sqlite3.IntegrityError:
                conn.execute("ROLLBACK")
                raise ValidationError([FieldError("name", NAME_TAKEN)]) from None
            except BaseException:
                conn.execute("ROLLBACK")
                raise
        finally:
            conn.close()

        created = replace(cmd, id=new_id)
        logger.info(
            "Created command '%s' (id=%s, partition=%s)",
            created.name,
            created.id,
            created.partition_key,
        )
        return created

    def update(self, command_id: int, changes: dict[str, Any]) -> Command:
        """Apply changes to a stored command and re-validate the whole record.

        Args:
            command_id: Id of the command to update.
            changes: Mapping of field name to new value. Only fields in
                ``UPDATABLE_FIELDS`` are accepted.

        Returns:
            The updated Command with a new updated_at timestamp.

        Raises:
            NotFoundError: If no command with the given id exists.
            ValidationError: If the resulting record breaks any rule.
            ValueError: If changes name a field that cannot be updated.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                current = self._fetch(conn, command_id)
                if current is None:
                    raise NotFoundError(command_id)

                cmd = normalize(replace(current, **changes))
                cmd = replace(cmd, updated_at=self._clock())

                errors = self._check(conn, cmd)
                if errors:
                    raise ValidationError(errors)

                conn.execute(
                    """
                    UPDATE commands SET
                        name = ?,
                        prompt = ?,
                        description = ?,
                        command_type = ?,
                        user_scope = ?,
                        owner_user_id = ?,
                        owner_project_id = ?,
                        partition_key = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        cmd.name,
                        cmd.prompt,
                        cmd.description,
                        cmd.command_type.value,
                        cmd.user_scope.value,
                        cmd.owner_user_id,
                        cmd.owner_project_id,
                        cmd.partition_key,
                        cmd.updated_at.isoformat(),
                        command_id,
                    ),
                )
                conn.execute("COMMIT")
            except sqlite3.IntegrityError:
                conn.execute("ROLLBACK")
                raise ValidationError([FieldError("name", NAME_TAKEN)]) from None
            except BaseException:
                conn.execute("ROLLBACK")
                raise
        finally:
            conn.close()

        logger.info("Updated command '%s' (id=%s)", cmd.name, command_id)
        return cmd

    def delete(self, command_id: int) -> None:
        """Delete a command by id.

        Args:
            command_id: Id of the command to delete.

        Raises:
            NotFoundError: If the command does not exist (including one that
                was already deleted).
        """
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM commands WHERE id = ?", (command_id,))
            deleted = cursor.rowcount
        finally:
            conn.close()

        if deleted == 0:
            raise NotFoundError(command_id)
        logger.info("Deleted command id=%s", command_id)

    def get(self, command_id: int) -> Command:
        """Retrieve a command by id.

        Raises:
            NotFoundError: If the command does not exist.
        """
        conn = self._connect()
        try:
            cmd = self._fetch(conn, command_id)
        finally:
            conn.close()

        if cmd is None:
            raise NotFoundError(command_id)
        return cmd

    def find_by_scope(
        self,
        command_type: CommandType | str,
        name: str,
        owner_user_id: str | None = None,
        owner_project_id: str | None = None,
        user_scope: UserScope | str | None = None,
    ) -> Command | None:
        """Find the command with the given name in one partition.

        The search is case-insensitive (name is normalized to lowercase).

        Args:
            command_type: Tier to search.
            name: Command name.
            owner_user_id: Owner, for user commands.
            owner_project_id: Project, for project and project_limited commands.
            user_scope: Scope, for user commands.

        Returns:
            Command if found, None otherwise.
        """
        key = partition_key(
            command_type,
            owner_user_id=owner_user_id,
            owner_project_id=owner_project_id,
            user_scope=user_scope,
        )
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM commands WHERE partition_key = ? AND name = ?",
                (key, name.strip().lower()),
            ).fetchone()
        finally:
            conn.close()

        return self._row_to_command(row) if row else None

    def list_for(self, user_id: str, project_id: str | None = None) -> list[Command]:
        """List every command a user may resolve in the given context.

        Covers global commands, the user's common commands and, when a
        project is given, the project's commands and the user's commands
        limited to that project.

        Args:
            user_id: Acting user.
            project_id: Current project, if any.

        Returns:
            Matching commands ordered by id; empty list if none exist.
        """
        keys = [
            partition_key(CommandType.GLOBAL),
            partition_key(
                CommandType.USER, owner_user_id=user_id, user_scope=UserScope.COMMON
            ),
        ]
        if project_id is not None:
            keys.append(partition_key(CommandType.PROJECT, owner_project_id=project_id))
            keys.append(
                partition_key(
                    CommandType.USER,
                    owner_user_id=user_id,
                    owner_project_id=project_id,
                    user_scope=UserScope.PROJECT_LIMITED,
                )
            )

        placeholders = ", ".join("?" for _ in keys)
        conn = self._connect()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM commands "
                f"WHERE partition_key IN ({placeholders}) ORDER BY id",
                keys,
            ).fetchall()
        finally:
            conn.close()

        return [self._row_to_command(row) for row in rows]


_repository: CommandRepository | None = None


def get_repository(db_path: str | None = None) -> CommandRepository:
    """Get the singleton CommandRepository instance.

    Args:
        db_path: Path to SQLite database (only used on first call). Defaults
            to ``settings.commands_db_path``.

    Returns:
        CommandRepository singleton instance.
    """
    global _repository
    if _repository is None:
        if db_path is None:
            from prompt_shortcuts.config import settings

            db_path = settings.commands_db_path
        _repository = CommandRepository(db_path=db_path)
    return _repository
