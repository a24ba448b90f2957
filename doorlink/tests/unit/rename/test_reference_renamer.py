"""
Unit tests for ReferenceRenamer propagation passes.
"""

import json

from doorlink.cancellation import CancellationToken
from doorlink.models import Document, Door, DoorLink
from doorlink.rename.reference_renamer import replace_in_container

S1_GUID = "s1-guid"
S2_GUID = "s2-guid"
S3_GUID = "s3-guid"


def _link(guid, door_id):
    return DoorLink(target_document_guid=guid, target_door_id=door_id)


def test_replace_in_container_matches_guid_and_id_exactly():
    document = Document(
        guid="g",
        entities=[
            Door(door_id="a", link=_link(S2_GUID, "entry")),
            Door(door_id="b", link=_link("other-guid", "entry")),
            Door(door_id="c", link=_link(S2_GUID, "Entry")),
            Door(door_id="d", link=_link(S2_GUID, "entry")),
        ],
    )

    assert replace_in_container(document, S2_GUID, "entry", "hall") == 2
    assert [door.link.target_door_id for door in document.doors()] == ["hall", "entry", "Entry", "hall"]


def test_sweep_skips_open_documents_regardless_of_dirty_state(session):
    s3 = session.accessor.open(S3_GUID)
    assert s3.dirty is False

    report = session.renamer.replace_in_closed_documents(S2_GUID, "entry", "entry2")

    assert report.skipped_open == [S3_GUID]
    assert report.links_changed == 1
    assert report.documents_saved == [S1_GUID]
    assert report.documents_processed == report.documents_total == 3
    assert s3.door("side").link.target_door_id == "entry"


def test_sweep_continues_past_unreadable_documents(session, project_root):
    (project_root / "levels" / "s1.level.json").write_text(
        json.dumps({"guid": S1_GUID, "entities": [{"kind": "door", "doorId": 3, "extra": True}]}), encoding="utf-8"
    )

    report = session.renamer.replace_in_closed_documents(S2_GUID, "entry", "entry2")

    assert [guid for guid, _ in report.failed] == [S1_GUID]
    assert report.documents_saved == [S3_GUID]
    assert report.documents_processed == 3
    assert session.accessor.transient_open_count == 0


def test_sweep_cancellation_keeps_processed_documents(session, project_root):
    token = CancellationToken()
    seen = []

    def progress(index, total, guid):
        seen.append(guid)
        if index == 0:
            token.cancel("operator")

    report = session.renamer.replace_in_closed_documents(
        S1_GUID, "start", "start2", cancel_token=token, progress=progress
    )

    assert report.cancelled is True
    assert report.documents_processed == 1
    assert seen == [S1_GUID]
    # s2 links to s1/start but was never reached.
    s2 = json.loads((project_root / "levels" / "s2.level.json").read_text(encoding="utf-8"))
    assert s2["entities"][1]["link"]["targetDoorId"] == "start"


def test_cancelled_rename_does_not_commit_door_id(session):
    s1 = session.accessor.open(S1_GUID)
    start = s1.door("start")
    token = CancellationToken()
    token.cancel()

    report = session.rename_service.rename(s1, start, "start2", cancel_token=token)

    assert report.cancelled is True
    assert report.committed is False
    assert start.door_id == "start"
    assert "Door ID NOT changed" in report.summary()
    assert "- Sweep cancelled after 0/3 documents" in report.summary()


def test_templates_without_matching_links_are_not_rewritten(session, project_root):
    path = project_root / "templates" / "arch.template.json"
    before = path.read_text(encoding="utf-8")

    links, saved, failed = session.renamer.replace_in_templates("unrelated", "entry", "x")

    assert (links, saved, failed) == (0, [], [])
    assert path.read_text(encoding="utf-8") == before


def test_template_save_clears_leaked_door_ids(session, project_root):
    path = project_root / "templates" / "arch.template.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["entities"][0]["doorId"] = "leaked"
    path.write_text(json.dumps(data), encoding="utf-8")

    links, saved, _ = session.renamer.replace_in_templates(S2_GUID, "entry", "entry2")

    assert links == 1
    assert saved == [str(path)]
    written = json.loads(path.read_text(encoding="utf-8"))
    assert written["entities"][0]["doorId"] == ""
    assert written["entities"][0]["link"]["targetDoorId"] == "entry2"


def test_sweep_reports_documents_that_failed_to_index(session, project_root):
    bad = project_root / "levels" / "bad.level.json"
    bad.write_bytes(b"\xff\xfe")

    report = session.renamer.replace_in_closed_documents(S2_GUID, "entry", "entry2")

    assert [path for path, _ in report.failed] == [str(bad)]
    assert report.documents_saved == [S1_GUID, S3_GUID]
    assert report.documents_processed == report.documents_total == 3


def test_rename_survives_non_utf8_document_and_template(session, project_root):
    (project_root / "levels" / "bad.level.json").write_bytes(b"\xff\xfe")
    bad_template = project_root / "templates" / "bad.template.json"
    bad_template.write_bytes(b"\xff\xfe")
    s1 = session.accessor.open(S1_GUID)
    s2 = session.accessor.open(S2_GUID)

    report = session.rename_service.rename(s2, s2.door("entry"), "entry2")

    assert report.committed is True
    assert s2.door("entry2") is not None
    assert s1.door("start").link.target_door_id == "entry2"
    assert [path for path, _ in report.templates_failed] == [str(bad_template)]
    assert report.template_links_changed == 1
    assert "- Failed to open: 1" in report.summary()


def test_sweep_progress_bar_closes_on_cancel(session):
    token = CancellationToken()
    token.cancel()

    report = session.renamer.replace_in_closed_documents(
        S2_GUID, "entry", "entry2", cancel_token=token, show_progress=True
    )

    assert report.cancelled is True
    assert report.documents_processed == 0
