from PySide6.QtCore import QSettings

from lidarplan import config


def test_open_settings_with_path_uses_ini(tmp_path):
    s = config.open_settings(tmp_path / "store.ini")
    assert s.format() == QSettings.IniFormat
    assert s.fileName().endswith("store.ini")


def test_defaults():
    assert config.SAVE_KEY == "SavedProjects"
    assert config.HISTORY_LIMIT >= 1
    assert config.PNG_SCALE > 0
