"""Page path (slug) helpers."""

import re
import secrets
import string

_DISALLOWED = re.compile(r"[^a-z0-9_-]")

PATH_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_PATH_LENGTH = 10


def normalize_path(value: str | None) -> str:
    """Map arbitrary input to a canonical slug.

    Trims surrounding whitespace, lowercases and drops every character that is
    not a lowercase letter, digit, underscore or hyphen. Idempotent.
    """
    if not value:
        return ""
    return _DISALLOWED.sub("", value.strip().lower())


def generate_random_path(length: int = DEFAULT_PATH_LENGTH) -> str:
    """Generate a random, already-normalized slug for a new page."""
    return "".join(secrets.choice(PATH_ALPHABET) for _ in range(length))


def generate_record_id() -> str:
    """Short random identifier for locally created page records."""
    return secrets.token_hex(6)
