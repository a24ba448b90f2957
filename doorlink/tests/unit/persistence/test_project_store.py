"""
Unit tests for the on-disk project store.
"""

import json

import pytest

from doorlink.exceptions import DocumentLoadError, DocumentNotFoundError
from doorlink.models import Document, Door
from doorlink.persistence import ProjectStore

S1_GUID = "s1-guid"
S2_GUID = "s2-guid"
S3_GUID = "s3-guid"

# pylint: disable=redefined-outer-name  # Reason: pytest fixtures are used as function parameters, which triggers this warning


@pytest.fixture
def store(project_root):
    return ProjectStore(project_root)


def test_guid_index_scans_nested_directories(store, project_root):
    assert store.document_guids() == [S1_GUID, S2_GUID, S3_GUID]
    assert store.resolve_path(S3_GUID) == project_root / "levels" / "extra" / "s3.level.json"
    assert store.resolve_path("") is None
    assert store.resolve_path("unknown") is None


def test_guid_survives_file_move(store, project_root):
    source = project_root / "levels" / "s2.level.json"
    target = project_root / "moved" / "renamed.level.json"
    target.parent.mkdir()
    source.rename(target)

    store.refresh()

    assert store.resolve_path(S2_GUID) == target
    assert store.guid_for_path(target) == S2_GUID


def test_parsing_errors_are_collected(store, project_root):
    (project_root / "bad.level.json").write_text("{", encoding="utf-8")
    (project_root / "noguid.level.json").write_text(json.dumps({"entities": []}), encoding="utf-8")
    (project_root / "dup.level.json").write_text(json.dumps({"guid": S1_GUID}), encoding="utf-8")

    index = store.refresh()

    assert len(index) == 3
    messages = dict(store.parsing_errors)
    assert messages[str(project_root / "noguid.level.json")] == "Missing document guid"
    assert messages[str(project_root / "bad.level.json")].startswith("Invalid JSON")
    assert len(store.parsing_errors) == 3


def test_missing_root_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProjectStore(tmp_path / "absent").refresh()


def test_load_document_parses_entities(store, project_root):
    document = store.load_document(project_root / "levels" / "s1.level.json")

    assert document.guid == S1_GUID
    assert document.path == project_root / "levels" / "s1.level.json"
    assert [door.door_id for door in document.doors()] == ["start", "room", "room"]
    assert len(document.entities) == 4
    assert document.door("start").link.target_document_guid == S2_GUID


def test_load_document_rejects_invalid_entities(store, project_root):
    path = project_root / "levels" / "s1.level.json"
    path.write_text(json.dumps({"guid": S1_GUID, "entities": [{"kind": "window"}]}), encoding="utf-8")

    with pytest.raises(DocumentLoadError) as exc_info:
        store.load_document(path)

    assert exc_info.value.path == str(path)


def test_save_document_writes_camel_case_fields(store, tmp_path):
    document = Document(guid="new", name="New", entities=[Door(door_id="a")])
    path = tmp_path / "out" / "new.level.json"

    store.save_document(document, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data) == ["guid", "name", "entities"]
    assert data["entities"][0]["doorId"] == "a"
    assert set(data["entities"][0]["link"]) == {"targetDocumentGuid", "targetDocumentPathCache", "targetDoorId"}
    assert "dirty" not in data and "path" not in data
    assert store.resolve_path("new") == path
    assert list(path.parent.glob("*.tmp")) == []


def test_save_document_without_path(store):
    with pytest.raises(DocumentNotFoundError):
        store.save_document(Document(guid="nowhere"))


def test_non_utf8_file_is_a_parsing_error(store, project_root):
    bad = project_root / "levels" / "bad.level.json"
    bad.write_bytes(b"\xff\xfe{}")

    index = store.refresh()

    assert sorted(index) == [S1_GUID, S2_GUID, S3_GUID]
    messages = dict(store.parsing_errors)
    assert messages[str(bad)].startswith("Not valid UTF-8")

    with pytest.raises(DocumentLoadError, match="not valid UTF-8"):
        store.load_document(bad)
