"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from domain.entities.page import parse_timestamp

DEFAULT_AVATAR = "https://github.com/shadcn.png"

# Editable profile fields, in the order the dashboard form presents them.
PROFILE_FIELDS = (
    "name",
    "title",
    "bio",
    "email",
    "twitter",
    "linkedin",
    "github",
    "avatar",
)

# Bookkeeping keys a record carries besides the editable fields.
_RECORD_KEYS = frozenset({"id", "created_at", "updated_at", "lastUpdated", "last_updated"})


@dataclass
class Profile:
    """Domain entity for a user's public profile.

    ``id`` is the auth provider's user identifier. Contact handles are stored
    as the raw strings the user typed. ``extra`` holds any other keys a
    stored record carried, so they survive a read and rewrite.
    """

    id: str
    name: str = ""
    title: str = ""
    bio: str = ""
    email: str = ""
    twitter: str = ""
    linkedin: str = ""
    github: str = ""
    avatar: str = ""
    last_updated: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def apply(self, changes: dict[str, Any]) -> None:
        """Overwrite editable fields present in ``changes``."""
        for name in PROFILE_FIELDS:
            if name in changes and changes[name] is not None:
                setattr(self, name, str(changes[name]))
        self.updated_at = datetime.utcnow()

    def editable_fields(self) -> dict[str, str]:
        """The user-editable fields as a plain dict."""
        return {name: getattr(self, name) for name in PROFILE_FIELDS}

    def to_record(self) -> dict[str, Any]:
        """Extra keys plus the editable fields, ready for the local store."""
        return {**self.extra, **self.editable_fields()}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Profile":
        """Build a Profile from a stored record; unknown keys land in ``extra``."""
        profile = cls(id=str(record["id"]))
        profile.extra = {
            k: v for k, v in record.items() if k not in PROFILE_FIELDS and k not in _RECORD_KEYS
        }
        for name in PROFILE_FIELDS:
            if record.get(name) is not None:
                setattr(profile, name, str(record[name]))
        created_at = parse_timestamp(record.get("created_at"))
        if created_at:
            profile.created_at = created_at
            profile.updated_at = parse_timestamp(record.get("updated_at")) or created_at
        # Local store records carry the camelCase stamp.
        profile.last_updated = parse_timestamp(
            record.get("lastUpdated", record.get("last_updated"))
        )
        return profile
