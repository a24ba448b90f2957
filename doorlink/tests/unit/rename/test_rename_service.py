"""
Unit tests for DoorRenameService.

Exercises the full rename path against the temporary project: open
documents, templates and the on-disk sweep.
"""

import json

import pytest

from doorlink.exceptions import DocumentNotFoundError, DuplicateNewIdError, InvalidNewIdError
from doorlink.models import Document, Door

S1_GUID = "s1-guid"
S2_GUID = "s2-guid"
S3_GUID = "s3-guid"

# pylint: disable=redefined-outer-name  # Reason: pytest fixtures are used as function parameters, which triggers this warning


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def _snapshot(project_root):
    """Text of every document and template in the project."""
    return {
        path.relative_to(project_root): path.read_text(encoding="utf-8")
        for path in sorted(project_root.rglob("*.json"))
    }


def test_scenario_rename_entry_propagates_to_every_link(session, open_s1_s2, project_root):
    """Renaming S2/entry rewrites S1's start link and the on-disk and template links."""
    s1, s2 = open_s1_s2
    entry = s2.door("entry")

    report = session.rename_service.rename(s2, entry, "entry2")

    assert report.committed is True
    assert entry.door_id == "entry2"
    assert s1.door("start").link.target_door_id == "entry2"
    assert report.open_links_changed == 1
    assert report.open_documents_changed == [S1_GUID]
    assert report.template_links_changed == 1
    assert report.disk.links_changed == 1
    assert report.disk.documents_saved == [S3_GUID]
    assert sorted(report.disk.skipped_open) == [S1_GUID, S2_GUID]
    assert report.total_links_changed == 3

    errors = session.validator.validate(s1)
    assert [error.error_type.value for error in errors] == ["duplicate_id"]


def test_open_documents_are_marked_dirty_not_saved(session, open_s1_s2, project_root):
    s1, s2 = open_s1_s2
    on_disk_before = (project_root / "levels" / "s1.level.json").read_text(encoding="utf-8")

    session.rename_service.rename(s2, s2.door("entry"), "entry2")

    assert s1.dirty is True
    assert s2.dirty is True
    assert (project_root / "levels" / "s1.level.json").read_text(encoding="utf-8") == on_disk_before


def test_templates_and_closed_documents_are_saved(session, open_s1_s2, project_root):
    _, s2 = open_s1_s2

    session.rename_service.rename(s2, s2.door("entry"), "entry2")

    template = _read(project_root / "templates" / "arch.template.json")
    assert template["entities"][0]["link"]["targetDoorId"] == "entry2"
    assert template["entities"][0]["doorId"] == ""
    s3 = _read(project_root / "levels" / "extra" / "s3.level.json")
    assert s3["entities"][0]["link"]["targetDoorId"] == "entry2"
    assert session.accessor.transient_open_count == 0
    assert not session.accessor.is_open(S3_GUID)


def test_rename_round_trip_restores_text(session, open_s1_s2, project_root):
    _, s2 = open_s1_s2
    before = _snapshot(project_root)
    entry = s2.door("entry")

    session.rename_service.rename(s2, entry, "entry2")
    session.rename_service.rename(s2, entry, "entry")
    session.accessor.save_open_documents()

    assert _snapshot(project_root) == before


def test_new_id_is_trimmed(session, open_s1_s2):
    _, s2 = open_s1_s2
    report = session.rename_service.rename(s2, s2.door("entry"), "  hall  ")
    assert report.new_id == "hall"
    assert s2.doors()[0].door_id == "hall"


def test_unchanged_id_is_a_no_op(session, open_s1_s2, project_root):
    _, s2 = open_s1_s2
    before = _snapshot(project_root)

    report = session.rename_service.rename(s2, s2.door("entry"), "entry")

    assert report.committed is False
    assert report.total_links_changed == 0
    assert s2.dirty is False
    assert _snapshot(project_root) == before
    assert not session.history.can_undo


@pytest.mark.parametrize("bad_id", ["", "   ", "has space", "x" * 65, "dot.id"])
def test_invalid_new_id_aborts_without_mutation(session, open_s1_s2, project_root, bad_id):
    s1, s2 = open_s1_s2
    before = _snapshot(project_root)

    with pytest.raises(InvalidNewIdError):
        session.rename_service.rename(s2, s2.door("entry"), bad_id)

    assert s2.doors()[0].door_id == "entry"
    assert s1.door("start").link.target_door_id == "entry"
    assert not s1.dirty and not s2.dirty
    assert _snapshot(project_root) == before


def test_duplicate_new_id_aborts_without_mutation(session, open_s1_s2, project_root):
    s1, s2 = open_s1_s2
    before = _snapshot(project_root)

    with pytest.raises(DuplicateNewIdError) as exc_info:
        session.rename_service.rename(s2, s2.door("entry"), "back")

    assert exc_info.value.user_friendly == "This ID already exists in the same document."
    assert s2.door("entry").door_id == "entry"
    assert s1.door("start").link.target_door_id == "entry"
    assert _snapshot(project_root) == before


def test_rename_requires_open_document(session):
    document = Document(guid="", entities=[Door(door_id="a")])
    with pytest.raises(DocumentNotFoundError):
        session.rename_service.rename(document, document.doors()[0], "b")


def test_rename_rejects_closed_copy_of_document(session, project_root):
    detached = session.store.load_document(project_root / "levels" / "s2.level.json")
    with pytest.raises(DocumentNotFoundError):
        session.rename_service.rename(detached, detached.door("entry"), "entry2")


def test_rename_without_full_sweep_leaves_closed_documents(session, open_s1_s2, project_root):
    _, s2 = open_s1_s2

    report = session.rename_service.rename(s2, s2.door("entry"), "entry2", full_sweep=False)

    assert report.disk is None
    assert report.committed is True
    assert report.template_links_changed == 1
    s3 = _read(project_root / "levels" / "extra" / "s3.level.json")
    assert s3["entities"][0]["link"]["targetDoorId"] == "entry"


def test_undo_reverts_only_the_door_id(session, open_s1_s2):
    s1, s2 = open_s1_s2
    entry = s2.door("entry")
    session.rename_service.rename(s2, entry, "entry2")

    assert session.history.can_undo
    session.history.undo()

    assert entry.door_id == "entry"
    assert s1.door("start").link.target_door_id == "entry2"

    session.history.redo()
    assert entry.door_id == "entry2"


def test_suggest_id_is_valid_and_uses_configured_length(session):
    suggestion = session.rename_service.suggest_id()
    assert len(suggestion) == 5
    assert suggestion.isalnum()


def test_summary_describes_each_domain(session, open_s1_s2):
    _, s2 = open_s1_s2

    summary = session.rename_service.rename(s2, s2.door("entry"), "entry2").summary()

    assert summary.splitlines()[0] == "Door ID changed: entry -> entry2"
    assert "- Open documents: 1 (documents marked dirty)" in summary
    assert "- Templates: 1 (templates saved)" in summary
    assert "- On-disk documents: 1 in 1 documents (saved)" in summary
    assert "- Skipped (open): 2" in summary
