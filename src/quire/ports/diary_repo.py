"""Diary repository interface."""

from typing import Protocol

from quire.core.draft import DiaryEntry


class DiaryRepository(Protocol):
    """Interface for the owner-scoped diary CRUD resource."""

    def list_entries(self) -> list[DiaryEntry]:
        """All entries owned by the caller, newest date first."""
        ...

    def get(self, entry_id: int) -> DiaryEntry:
        """Fetch one entry. Raises AuthorizationError/NotFoundError."""
        ...

    def create(self, payload: dict) -> DiaryEntry:
        """Create an entry from {title, content, date}. Returns it with its id."""
        ...

    def update(self, entry_id: int, payload: dict) -> DiaryEntry:
        """Update an entry. Raises AuthorizationError/NotFoundError."""
        ...

    def delete(self, entry_id: int) -> None:
        """Delete an entry. Raises AuthorizationError/NotFoundError."""
        ...
