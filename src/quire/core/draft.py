"""Draft and entry domain types - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from zoneinfo import ZoneInfo

from quire.config import DEFAULT_TIMEZONE
from quire.errors import ValidationError


class SaveStatus(Enum):
    """What the user is told about the remote copy of their draft."""

    SAVED = "saved"
    SAVING = "saving"
    UNSAVED = "unsaved"

    def label(self) -> str:
        labels = {
            SaveStatus.SAVED: "Saved",
            SaveStatus.SAVING: "Saving...",
            SaveStatus.UNSAVED: "Unsaved changes",
        }
        return labels[self]


def today_in(timezone: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> date:
    """Calendar date in the given timezone, regardless of the host's local zone."""
    tz = ZoneInfo(timezone)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(tz).date()


def parse_api_date(value: str) -> date:
    """Parse 'YYYY-MM-DD' or a full ISO timestamp down to its date part."""
    return date.fromisoformat(value.split("T")[0].split(" ")[0])


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class DiaryEntry:
    """A persisted diary entry as returned by the server."""

    id: int
    title: str
    content: str
    date: date
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "DiaryEntry":
        """Create DiaryEntry from a diary API response."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            content=data.get("content") or "",
            date=parse_api_date(data["date"]),
            user_id=data.get("user_id"),
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass
class Draft:
    """
    The editable in-memory copy of one diary entry.

    `id` is None until the first successful save returns one.
    """

    title: str = ""
    content: str = ""
    date: date = field(default_factory=today_in)
    id: int | None = None

    @classmethod
    def blank(cls, timezone: str = DEFAULT_TIMEZONE) -> "Draft":
        """A fresh draft dated today in the given timezone."""
        return cls(date=today_in(timezone))

    @classmethod
    def from_entry(cls, entry: DiaryEntry) -> "Draft":
        return cls(title=entry.title, content=entry.content, date=entry.date, id=entry.id)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def has_title(self) -> bool:
        return bool(self.title.strip())

    def validate(self) -> None:
        """Raise ValidationError if the draft cannot be saved."""
        if not self.has_title():
            raise ValidationError("Please enter a title")

    def fields(self) -> tuple:
        return (self.title, self.content, self.date)

    def to_payload(self) -> dict:
        """Request body for create and update."""
        return {
            "title": self.title,
            "content": self.content,
            "date": self.date.isoformat(),
        }
