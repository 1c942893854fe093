from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_api.domain.records import (  # noqa: E402
    GALLERY,
    PROJECTS,
    SCHEMAS,
    TESTIMONIES,
    ValidationError,
    normalize_record,
)


def test_schemas_cover_the_three_collections():
    assert list(SCHEMAS) == ["projects", "testimonies", "gallery"]
    assert PROJECTS.fields == ("title", "link", "image", "client", "description")
    assert TESTIMONIES.saved_message == "Testimony saved"
    assert GALLERY.saved_message == "Gallery item saved"


def test_normalize_trims_and_drops_unknown_keys():
    payload = {"image": "  a.png\n", "title": "\tSunset ", "extra": "ignored"}
    record = normalize_record(GALLERY, payload)
    assert record == {"image": "a.png", "title": "Sunset"}
    assert list(record) == ["image", "title"]
    assert payload["image"] == "  a.png\n"


def test_single_character_fields_are_valid():
    record = normalize_record(TESTIMONIES, {"name": "a", "country": "b", "review": "c"})
    assert record == {"name": "a", "country": "b", "review": "c"}


@pytest.mark.parametrize(
    "payload, bad",
    [
        ({"name": "", "country": "X", "review": "Y"}, ["name"]),
        ({"name": "   ", "country": "X", "review": "Y"}, ["name"]),
        ({"country": "X"}, ["name", "review"]),
        ({"name": 42, "country": "X", "review": None}, ["name", "review"]),
        ({"name": ["a"], "country": {"a": 1}, "review": "Y"}, ["name", "country"]),
    ],
)
def test_invalid_fields_are_reported(payload, bad):
    with pytest.raises(ValidationError) as info:
        normalize_record(TESTIMONIES, payload)
    assert info.value.fields == bad
    assert str(info.value) == "All fields required"


def test_non_mapping_payload_fails_every_field():
    with pytest.raises(ValidationError) as info:
        normalize_record(GALLERY, ["image", "title"])
    assert info.value.fields == ["image", "title"]
