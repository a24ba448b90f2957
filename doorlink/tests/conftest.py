"""
Test configuration and fixtures for the doorlink test suite.

Builds a throwaway project on disk for each test:

- S1 (`s1-guid`): door `start` linking to S2/`entry`, two doors both named
  `room`, and a non-interactable prop.
- S2 (`s2-guid`): door `entry` and door `back` linking to S1/`start`.
- S3 (`s3-guid`): a door `side` linking to S2/`entry`, never opened by the
  fixtures so it is reached only by the on-disk sweep.
- `arch.template.json`: a template door linking to S2/`entry`.
"""

import json
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

os.environ.setdefault("DOORLINK_LOGGING_ENVIRONMENT", "unit_test")

from doorlink.config import AppConfig, get_config, reset_config  # noqa: E402
from doorlink.container import AuthoringSession  # noqa: E402
from doorlink.structured_logging.enhanced_logging_config import configure_enhanced_structlog  # noqa: E402

# pylint: disable=redefined-outer-name  # Reason: pytest fixtures are used as function parameters, which triggers this warning

S1_GUID = "s1-guid"
S2_GUID = "s2-guid"
S3_GUID = "s3-guid"


def door(door_id: str, target_guid: str = "", target_door_id: str = "", name: str = "Door", **extra: Any) -> dict:
    """Door entity as it appears in a document file."""
    data = {
        "kind": "door",
        "name": name,
        "doorId": door_id,
        "link": {
            "targetDocumentGuid": target_guid,
            "targetDocumentPathCache": "",
            "targetDoorId": target_door_id,
        },
        "position": {"x": 0.0, "y": 0.0},
        "entryAnchor": None,
        "template": None,
    }
    data.update(extra)
    return data


def write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> None:
    """Route structlog through the standard library once for the whole run."""
    configure_enhanced_structlog(environment="unit_test", log_level="WARNING")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Project directory with documents S1, S2, S3 and one template."""
    root = tmp_path / "project"
    write_json(
        root / "levels" / "s1.level.json",
        {
            "guid": S1_GUID,
            "name": "S1",
            "entities": [
                door("start", S2_GUID, "entry", name="Front Door", position={"x": 1.0, "y": 2.0}),
                door("room", name="Room A"),
                door("room", name="Room B"),
                {"kind": "prop", "name": "Barrel", "position": {"x": 4.0, "y": 0.0}, "interactable": False},
            ],
        },
    )
    write_json(
        root / "levels" / "s2.level.json",
        {
            "guid": S2_GUID,
            "name": "S2",
            "entities": [
                door("entry", name="Entry", position={"x": 10.0, "y": 0.0}, entryAnchor={"x": 11.0, "y": 0.5}),
                door("back", S1_GUID, "start", name="Back"),
            ],
        },
    )
    write_json(
        root / "levels" / "extra" / "s3.level.json",
        {"guid": S3_GUID, "name": "S3", "entities": [door("side", S2_GUID, "entry", name="Side")]},
    )
    write_json(
        root / "templates" / "arch.template.json",
        {"name": "Arch", "entities": [door("", S2_GUID, "entry", name="Arch")]},
    )
    return root


@pytest.fixture
def app_config(project_root: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[AppConfig, None, None]:
    """AppConfig pointing at the temporary project and a private preferences file."""
    monkeypatch.setenv("DOORLINK_PROJECT_ROOT", str(project_root))
    monkeypatch.setenv("DOORLINK_PREFERENCES_PATH", str(tmp_path / "prefs" / "preferences.json"))
    reset_config()
    yield get_config()
    reset_config()


@pytest.fixture
def session(app_config: AppConfig) -> AuthoringSession:
    """Authoring session over the temporary project."""
    return AuthoringSession(app_config)


@pytest.fixture
def open_s1_s2(session: AuthoringSession):
    """Open S1 and S2 in the authoring session and return them."""
    return session.accessor.open(S1_GUID), session.accessor.open(S2_GUID)
