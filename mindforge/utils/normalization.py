"""Input normalization for emails, display names and free-form string lists."""

from typing import Optional


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Lowercase and trim an email so lookups and the unique index agree.

    Returns None for empty input.
    """
    if not email:
        return None
    return email.strip().lower()


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Trim and collapse inner whitespace ("  Ada   Lovelace " -> "Ada Lovelace")."""
    if not name:
        return None
    return " ".join(name.split())


def normalize_list(values: Optional[list[str]]) -> list[str]:
    """Strip entries, drop blanks and duplicates, keep first-seen order."""
    if not values:
        return []
    seen: set[str] = set()
    result = []
    for value in values:
        cleaned = " ".join(str(value).split())
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result
