"""Tests for the CommandService facade."""

import logging
from unittest.mock import patch

import pytest

from prompt_shortcuts.commands.errors import NotFoundError, ValidationError
from prompt_shortcuts.commands.models import CommandType
from prompt_shortcuts.commands.schemas import (
    CommandCreate,
    CommandSummary,
    CommandUpdate,
)
from prompt_shortcuts.commands.service import CommandService, get_service


@pytest.fixture
def service(repo, clock) -> CommandService:
    members = {("u1", "p1")}
    return CommandService(
        repo,
        is_member=lambda user_id, project_id: (user_id, project_id) in members,
        clock=clock,
    )


class TestServiceCrud:
    """Test suite for create/update/delete through the service."""

    def test_create(self, service) -> None:
        """Test creating a command from a payload."""
        cmd = service.create(
            CommandCreate(
                name="Summarize",
                prompt="Please summarize: {input}",
                owner_user_id="u1",
                description="Short summary",
            )
        )

        assert cmd.id > 0
        assert cmd.name == "summarize"
        assert cmd.command_type is CommandType.GLOBAL
        assert service.get(cmd.id) == cmd

    def test_create_string_scopes(self, service) -> None:
        """Test that scope values given as strings are accepted."""
        cmd = service.create(
            CommandCreate(
                name="mine",
                prompt="p",
                owner_user_id="u1",
                command_type="user",
                user_scope="project_limited",
                owner_project_id="p1",
            )
        )
        assert cmd.partition_key == '["user", "u1", "project_limited", "p1"]'

    def test_create_reports_all_errors(self, service, caplog) -> None:
        """Test that every violation is raised at once and logged."""
        service.create(CommandCreate(name="dup", prompt="p", owner_user_id="u1"))

        with caplog.at_level(logging.INFO):
            with pytest.raises(ValidationError) as exc_info:
                service.create(
                    CommandCreate(
                        name="DUP",
                        prompt="",
                        owner_user_id="u2",
                        owner_project_id="p1",
                    )
                )

        assert set(exc_info.value.fields) == {"name", "prompt", "owner_project_id"}
        assert "Rejected command 'DUP'" in caplog.text

    def test_update_only_set_fields(self, service) -> None:
        """Test that unset fields are left unchanged."""
        cmd = service.create(
            CommandCreate(
                name="s", prompt="old", owner_user_id="u1", description="keep me"
            )
        )

        updated = service.update(cmd.id, CommandUpdate(prompt="new"))

        assert updated.prompt == "new"
        assert updated.description == "keep me"

    def test_update_can_clear_description(self, service) -> None:
        """Test that an explicit None clears a field."""
        cmd = service.create(
            CommandCreate(name="s", prompt="p", owner_user_id="u1", description="d")
        )
        updated = service.update(cmd.id, CommandUpdate(description=None))
        assert updated.description is None

    def test_update_missing(self, service) -> None:
        """Test updating an unknown id."""
        with pytest.raises(NotFoundError):
            service.update(123, CommandUpdate(prompt="x"))

    def test_delete(self, service) -> None:
        """Test that deleted commands stop resolving."""
        cmd = service.create(
            CommandCreate(name="gone", prompt="Gone: {input}", owner_user_id="u1")
        )
        service.delete(cmd.id)

        with pytest.raises(NotFoundError):
            service.delete(cmd.id)


class TestServiceQueries:
    """Test suite for resolution and listing through the service."""

    def test_resolve_and_expand(self, service, alice) -> None:
        """Test the summarize scenario end to end."""
        cmd = service.create(
            CommandCreate(
                name="summarize", prompt="Please summarize: {input}", owner_user_id="u1"
            )
        )

        result = service.resolve_and_expand("/summarize test data", alice)

        assert result.expanded is True
        assert result.text == "Please summarize: test data"
        assert result.matched_command_id == cmd.id

    def test_resolve_unknown(self, service, alice) -> None:
        """Test the unknown-command scenario end to end."""
        result = service.resolve_and_expand("/unknown test", alice)
        assert result.expanded is False
        assert result.text == "/unknown test"

    def test_resolve_with_custom_prefix(self, repo, alice) -> None:
        """Test a service configured with another prefix."""
        service = CommandService(repo, prefix="!")
        service.create(CommandCreate(name="hi", prompt="Hello", owner_user_id="u1"))

        assert service.resolve_and_expand("!hi", alice).text == "Hello"
        assert not service.resolve_and_expand("/hi", alice).expanded

    def test_list_available(self, service, alice, project) -> None:
        """Test autocomplete listing."""
        service.create(
            CommandCreate(
                name="global_test", prompt="p", owner_user_id="u2", description="G"
            )
        )
        service.create(
            CommandCreate(
                name="proj",
                prompt="p",
                owner_user_id="u2",
                command_type="project",
                owner_project_id="p1",
            )
        )

        assert service.list_available(alice, prefix="GLOBAL") == [
            CommandSummary(name="global_test", description="G")
        ]
        assert [c.name for c in service.list_available(alice, project)] == [
            "global_test",
            "proj",
        ]

    def test_list_grouped(self, service, alice) -> None:
        """Test grouped listing."""
        service.create(CommandCreate(name="a", prompt="p", owner_user_id="u1"))
        service.create(
            CommandCreate(name="b", prompt="p", owner_user_id="u1", command_type="user")
        )

        grouped = service.list_grouped(alice)

        assert [c.name for c in grouped[CommandType.GLOBAL]] == ["a"]
        assert [c.name for c in grouped[CommandType.USER]] == ["b"]

    def test_can_edit_and_view(self, service, alice, bob, admin) -> None:
        """Test the permission predicates by id."""
        cmd = service.create(
            CommandCreate(
                name="proj",
                prompt="p",
                owner_user_id="u1",
                command_type="project",
                owner_project_id="p1",
            )
        )

        assert service.can_edit(cmd.id, alice)
        assert service.can_edit(cmd.id, admin)
        assert not service.can_edit(cmd.id, bob)
        assert service.can_view(cmd.id, alice)
        assert not service.can_view(cmd.id, bob)

    def test_predicates_unknown_id(self, service, alice) -> None:
        """Test that predicates on unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            service.can_edit(999, alice)


class TestGetService:
    """Test suite for the settings-backed singleton."""

    def _create_project_command(self, service: CommandService) -> int:
        return service.create(
            CommandCreate(
                name="proj",
                prompt="p",
                owner_user_id="u2",
                command_type="project",
                owner_project_id="p1",
            )
        ).id

    def test_denies_project_commands_by_default(self, repo, alice) -> None:
        """Test that without a membership check nobody sees project commands."""
        with (
            patch("prompt_shortcuts.commands.service._service", None),
            patch(
                "prompt_shortcuts.commands.service.get_repository", return_value=repo
            ),
        ):
            service = get_service()
            command_id = self._create_project_command(service)
            assert not service.can_view(command_id, alice)

    def test_uses_given_membership_check(self, repo, alice, bob) -> None:
        """Test that the host's membership check is used for visibility."""
        with (
            patch("prompt_shortcuts.commands.service._service", None),
            patch(
                "prompt_shortcuts.commands.service.get_repository", return_value=repo
            ),
        ):
            service = get_service(
                is_member=lambda user_id, project_id: user_id == "u1"
            )
            command_id = self._create_project_command(service)
            assert service.can_view(command_id, alice)
            assert not service.can_view(command_id, bob)
            assert get_service() is service
