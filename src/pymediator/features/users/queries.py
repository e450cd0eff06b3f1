"""User queries (read-only) and their handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pymediator.dispatch.decorators import request_handler
from pymediator.domain.messages import Request
from pymediator.features.users.models import UserDto, UserNotFoundError, UserPage

if TYPE_CHECKING:
    from pymediator.features.users.feature import UsersFeature


class GetUserByIdQuery(Request[UserDto]):
    user_id: int | None = None


class GetAllUsersQuery(Request[UserPage]):
    page: int = 1
    limit: int = 10


@request_handler(GetUserByIdQuery)
class GetUserByIdQueryHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, query: GetUserByIdQuery) -> UserDto:
        user_id = query.user_id or 0
        user = await self._feature.repository.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user


@request_handler(GetAllUsersQuery)
class GetAllUsersQueryHandler:
    def __init__(self, feature: UsersFeature) -> None:
        self._feature = feature

    async def handle_async(self, query: GetAllUsersQuery) -> UserPage:
        items, total = await self._feature.repository.list_page(query.page, query.limit)
        return UserPage(items=items, page=query.page, limit=query.limit, total=total)
