"""Page domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from domain.paths import generate_record_id


@dataclass
class Page:
    """Domain entity for a published profile page.

    ``path`` is the normalized slug and never changes after creation.
    """

    path: str
    user_id: str
    id: str = field(default_factory=generate_record_id)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def to_record(self) -> dict[str, Any]:
        """Serialize into the JSON-compatible local store layout."""
        return {
            "path": self.path,
            "user_id": self.user_id,
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Page":
        """Build a Page from a local store record."""
        created_at = parse_timestamp(record.get("created_at"))
        updated_at = parse_timestamp(record.get("updated_at")) or created_at
        page = cls(
            path=record["path"],
            user_id=str(record["user_id"]),
            id=str(record.get("id") or generate_record_id()),
        )
        if created_at:
            page.created_at = created_at
            page.updated_at = updated_at or created_at
        return page


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        # Records written by browsers use a trailing "Z".
        return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
    return None
