"""Record schemas for the three public collections and their validation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

REQUIRED_MESSAGE = "All fields required"


class ValidationError(Exception):
    """Raised when a payload misses a required field (or sends it empty)."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(REQUIRED_MESSAGE)
        self.fields = fields


@dataclass(frozen=True)
class CollectionSchema:
    name: str
    fields: tuple[str, ...]
    saved_message: str


PROJECTS = CollectionSchema(
    name="projects",
    fields=("title", "link", "image", "client", "description"),
    saved_message="Project saved",
)
TESTIMONIES = CollectionSchema(
    name="testimonies",
    fields=("name", "country", "review"),
    saved_message="Testimony saved",
)
GALLERY = CollectionSchema(
    name="gallery",
    fields=("image", "title"),
    saved_message="Gallery item saved",
)

SCHEMAS: dict[str, CollectionSchema] = {s.name: s for s in (PROJECTS, TESTIMONIES, GALLERY)}


def normalize_record(schema: CollectionSchema, payload: Mapping[str, Any] | None) -> dict[str, str]:
    """
    Return a new record with every schema field trimmed.

    Unknown keys are dropped. Missing, non-string or blank values raise
    ValidationError listing every offending field; the payload is never mutated.
    """
    source = payload if isinstance(payload, Mapping) else {}
    record: dict[str, str] = {}
    invalid: list[str] = []
    for field in schema.fields:
        value = source.get(field)
        if not isinstance(value, str) or not value.strip():
            invalid.append(field)
            continue
        record[field] = value.strip()
    if invalid:
        raise ValidationError(invalid)
    return record
