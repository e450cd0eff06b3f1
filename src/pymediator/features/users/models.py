"""User read models and domain errors."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class UserDto(BaseModel):
    """Public view of a user record."""

    model_config = {"frozen": True}

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime
    updated_at: datetime


class UserPage(BaseModel):
    """One page of users."""

    model_config = {"frozen": True}

    items: list[UserDto]
    page: int
    limit: int
    total: int

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total


class UserNotFoundError(LookupError):
    """Raised by handlers when a user id does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id
