"""
Unit tests for the user preferences file.
"""

from doorlink.preferences import VALIDATION_ON_RUN_KEY, UserPreferences


def test_missing_file_reads_defaults(tmp_path):
    preferences = UserPreferences(tmp_path / "nope" / "preferences.json")
    assert preferences.get_bool(VALIDATION_ON_RUN_KEY, True) is True
    assert preferences.get_bool(VALIDATION_ON_RUN_KEY, False) is False


def test_set_bool_writes_through(tmp_path):
    path = tmp_path / "prefs" / "preferences.json"
    UserPreferences(path).set_bool(VALIDATION_ON_RUN_KEY, False)

    assert path.exists()
    assert UserPreferences(path).get_bool(VALIDATION_ON_RUN_KEY, True) is False


def test_unreadable_file_reads_defaults(tmp_path):
    path = tmp_path / "preferences.json"
    path.write_text("[not an object", encoding="utf-8")

    assert UserPreferences(path).get_bool(VALIDATION_ON_RUN_KEY, True) is True
