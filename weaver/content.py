from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import HeaderFormatError, LeadingContentError, MissingDelimiters

DELIMITER = "---\n"
SCALAR_TYPES = (str, int, float, bool)


@dataclass(frozen=True)
class FrontMatter:
    title: str
    date: dt.datetime
    tags: tuple[str, ...]
    layout: str


def slug_for(path: Path) -> str:
    return path.stem


def parse_front_matter(text: str) -> tuple[FrontMatter, str]:
    """Split a post into its front matter and the Markdown body.

    The header sits between the first two ``---`` lines and must start at the
    very first byte of the document. The body is returned untouched.
    """
    parts = text.split(DELIMITER, 2)
    if len(parts) < 3:
        raise MissingDelimiters("could not find both front matter delimiters")
    before, header, body = parts
    if before:
        raise LeadingContentError("data before front matter start delimiter")

    try:
        meta = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        raise HeaderFormatError(f"bad front matter format: {exc}") from exc
    if not isinstance(meta, dict):
        raise HeaderFormatError("bad front matter format: header must be a mapping")

    front_matter = FrontMatter(
        title=parse_scalar(meta, "title"),
        date=parse_date(meta.get("date")),
        tags=parse_tags(meta.get("tags")),
        layout=parse_scalar(meta, "layout"),
    )
    return front_matter, body


def parse_scalar(meta: dict, key: str) -> str:
    value = meta.get(key)
    if value is None:
        return ""
    if not isinstance(value, SCALAR_TYPES):
        raise HeaderFormatError(f"bad front matter format: {key} must be text, got {type(value).__name__}")
    return str(value)


def parse_tags(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise HeaderFormatError(f"bad front matter format: tags must be a list, got {type(value).__name__}")
    tags = []
    for item in value:
        if not isinstance(item, SCALAR_TYPES):
            raise HeaderFormatError(f"bad front matter format: tag {item!r} is not text")
        tags.append(str(item))
    return tuple(tags)


def parse_date(value: object) -> dt.datetime:
    if value is None:
        raise HeaderFormatError("bad front matter format: date is required")
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = dt.datetime.fromisoformat(text)
        except ValueError as exc:
            raise HeaderFormatError(f"bad front matter format: invalid date {value!r}") from exc
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    raise HeaderFormatError(f"bad front matter format: date must be a date, got {type(value).__name__}")
