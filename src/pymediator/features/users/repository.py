"""In-memory user store.

Stands in for the database-backed repository; every method is a coroutine
so handlers await it exactly as they would real I/O.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime

from pymediator.dispatch.telemetry import traced
from pymediator.features.users.models import UserDto


@dataclass
class _UserRow:
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def to_dto(self) -> UserDto:
        return UserDto(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class InMemoryUserRepository:
    """Dict-backed user storage with sequential integer ids."""

    def __init__(self) -> None:
        self._rows: dict[int, _UserRow] = {}
        self._next_id = 1

    @traced
    async def add(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserDto:
        now = datetime.now(UTC)
        row = _UserRow(
            id=self._next_id,
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            password_hash=_hash_password(password),
            created_at=now,
            updated_at=now,
        )
        self._rows[row.id] = row
        self._next_id += 1
        return row.to_dto()

    @traced
    async def get(self, user_id: int) -> UserDto | None:
        row = self._rows.get(user_id)
        return row.to_dto() if row is not None else None

    @traced
    async def list_page(self, page: int, limit: int) -> tuple[list[UserDto], int]:
        ordered = sorted(self._rows.values(), key=lambda r: r.id)
        start = (page - 1) * limit
        return [r.to_dto() for r in ordered[start : start + limit]], len(ordered)

    @traced
    async def update(
        self,
        user_id: int,
        *,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> tuple[UserDto, list[str]] | None:
        """Apply non-None fields. Returns the new view and the changed field names."""
        row = self._rows.get(user_id)
        if row is None:
            return None
        changed: list[str] = []
        for name, value in (
            ("email", email.lower() if email else None),
            ("first_name", first_name),
            ("last_name", last_name),
        ):
            if value is not None and getattr(row, name) != value:
                setattr(row, name, value)
                changed.append(name)
        if changed:
            row.updated_at = datetime.now(UTC)
        return row.to_dto(), changed

    @traced
    async def delete(self, user_id: int) -> UserDto | None:
        row = self._rows.pop(user_id, None)
        return row.to_dto() if row is not None else None

    async def exists(self, user_id: int) -> bool:
        return user_id in self._rows

    async def email_available(self, email: str) -> bool:
        if not isinstance(email, str):
            return True
        needle = email.lower()
        return all(row.email != needle for row in self._rows.values())

    def __len__(self) -> int:
        return len(self._rows)
