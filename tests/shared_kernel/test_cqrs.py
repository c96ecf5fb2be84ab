"""
Unit tests for Shared Kernel CQRS Contracts.
"""

from dataclasses import dataclass

import pytest

from shared_kernel.application import Command, CommandHandler, Query, QueryHandler, QueryView
from shared_kernel.domain import DomainEntityId, Result, SortDirection


@dataclass(frozen=True)
class RenameUser(Command):
    user_id: DomainEntityId
    name: str


@dataclass(frozen=True)
class ListUsers(Query):
    view: QueryView = QueryView.SUMMARY
    sort: SortDirection = SortDirection.ASC


class RenameUserHandler(CommandHandler[RenameUser, Result[str]]):
    """Handler returning a Result instead of raising."""

    async def __call__(self, command: RenameUser) -> Result[str]:
        if not command.name.strip():
            return Result.failure("Name cannot be blank")
        return Result.success(command.name)


class ListUsersHandler(QueryHandler[ListUsers, list[str]]):
    async def __call__(self, query: ListUsers) -> list[str]:
        names = ["grace", "ada"]
        return sorted(names, reverse=query.sort is SortDirection.DESC)


class TestHandlers:
    """Tests for command and query handlers."""

    @pytest.mark.asyncio
    async def test_command_handler(self) -> None:
        handler = RenameUserHandler()

        assert (await handler(RenameUser(DomainEntityId.random(), "Ada"))).get_or_none() == "Ada"
        assert (await handler(RenameUser(DomainEntityId.random(), " "))).is_failure()

    @pytest.mark.asyncio
    async def test_query_handler(self) -> None:
        handler = ListUsersHandler()

        assert await handler(ListUsers()) == ["ada", "grace"]
        assert await handler(ListUsers(sort=SortDirection.DESC)) == ["grace", "ada"]

    def test_handlers_are_abstract(self) -> None:
        """Test handlers must implement __call__."""
        with pytest.raises(TypeError):
            CommandHandler()  # type: ignore[abstract]

    def test_enum_values(self) -> None:
        assert QueryView("detailed") is QueryView.DETAILED
        assert SortDirection.DESC.value == "desc"
