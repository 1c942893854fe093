"""
Tests for the JSON file adapter (atomic writes, corrupt file handling).
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Garante que o pacote seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_api.repositories.json_storage import (  # noqa: E402
    PersistenceError,
    load_records,
    save_records,
)


def test_missing_file_is_empty(tmp_path):
    assert load_records(tmp_path / "nope.json") == []


def test_save_writes_pretty_printed_array(tmp_path):
    target = tmp_path / "nested" / "gallery.json"
    save_records(target, [{"image": "ç.png", "title": "Olá"}])

    text = target.read_text(encoding="utf-8")
    assert text == '[\n  {\n    "image": "ç.png",\n    "title": "Olá"\n  }\n]\n'
    assert load_records(target) == [{"image": "ç.png", "title": "Olá"}]
    assert [p.name for p in target.parent.iterdir()] == ["gallery.json"]


@pytest.mark.parametrize(
    "content",
    [b"{not json", b"\xff\xfe\x00garbage", b'{"title": "object, not array"}'],
)
def test_corrupt_file_is_backed_up_and_reset(tmp_path, content, caplog):
    target = tmp_path / "projects.json"
    target.write_bytes(content)

    assert load_records(target) == []

    assert not target.exists()
    backups = list(tmp_path.glob("projects.corrupt-*.json"))
    assert len(backups) == 1
    assert backups[0].read_bytes() == content
    assert "Corrupt data file" in caplog.text


def test_save_failure_raises_and_keeps_previous_file(tmp_path, monkeypatch):
    target = tmp_path / "testimonies.json"
    save_records(target, [{"name": "a", "country": "b", "review": "c"}])

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("portfolio_api.repositories.json_storage.os.replace", boom)
    with pytest.raises(PersistenceError):
        save_records(target, [])

    assert json.loads(target.read_text(encoding="utf-8")) == [{"name": "a", "country": "b", "review": "c"}]
    assert [p.name for p in tmp_path.iterdir()] == ["testimonies.json"]


def test_save_into_unusable_directory_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    with pytest.raises(PersistenceError):
        save_records(blocker / "gallery.json", [])
