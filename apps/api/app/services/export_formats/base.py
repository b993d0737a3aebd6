"""Export format building blocks.

A format is an ordered list of columns, each a header plus a pure extractor
``(card) -> str``. Extractors must be total: missing data yields "".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class ExportColumn:
    header: str
    get_value: Callable[[Any], str]


@dataclass(frozen=True)
class ExportFormat:
    id: str
    name: str
    description: str
    columns: tuple[ExportColumn, ...]

    @property
    def headers(self) -> list[str]:
        return [column.header for column in self.columns]

    def row(self, card: Any) -> list[str]:
        return [column.get_value(card) for column in self.columns]


def text(card: Any, attr: str) -> str:
    """String value of ``card.attr``, or "" when missing."""
    value = getattr(card, attr, None)
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def location_name(card: Any) -> str:
    location = getattr(card, "location", None)
    return text(location, "name") if location is not None else ""


def interests(card: Any) -> list[str]:
    values = getattr(card, "interests", None) or []
    return [str(v) for v in values if v is not None]


def phone_digits(phone: str) -> str:
    return _NON_DIGITS.sub("", phone)


def split_name(full_name: str | None) -> tuple[str, str]:
    """
    Split a display name into (first, last).

    "John" -> ("John", ""), "John David Smith" -> ("John", "David Smith").
    """
    if not full_name or not full_name.strip():
        return "", ""
    parts = full_name.split()
    return parts[0], " ".join(parts[1:])


def match_keywords(
    value: str | None,
    rules: tuple[tuple[tuple[str, ...], str], ...],
    default: str,
) -> str:
    """Return the label of the first rule with a keyword contained in ``value``."""
    if not value:
        return default
    normalized = value.lower()
    for keywords, label in rules:
        if any(keyword in normalized for keyword in keywords):
            return label
    return default


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_date(value: date | datetime | None, pattern: str) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = as_utc(value)
    return value.strftime(pattern)
