import json
from pathlib import Path

from attendance_summary.config.user_settings_store import UserSettingsStore, clean_weights
from attendance_summary.models import DEFAULT_ATTENDANCE_WEIGHTS


def test_defaults_when_no_file_exists(tmp_path: Path) -> None:
    store = UserSettingsStore(pointer_dir=tmp_path)

    assert store.weights() == DEFAULT_ATTENDANCE_WEIGHTS
    assert store.app_data_dir == tmp_path
    assert store.get("app_data_dir") == str(tmp_path)


def test_update_persists_weights(tmp_path: Path) -> None:
    store = UserSettingsStore(pointer_dir=tmp_path)
    store.update(attendance_weights={"Absent": 0, "Late": "0.4", "Bogus": "high"})

    reloaded = UserSettingsStore(pointer_dir=tmp_path)

    assert reloaded.weights() == {"Absent": 0.0, "Late": 0.4}
    saved = json.loads((tmp_path / "user_settings.json").read_text(encoding="utf-8"))
    assert saved["attendance_weights"] == {"Absent": 0.0, "Late": 0.4}


def test_update_moves_app_data_dir(tmp_path: Path) -> None:
    pointer_dir = tmp_path / "pointer"
    data_dir = tmp_path / "data"
    store = UserSettingsStore(pointer_dir=pointer_dir)

    store.update(app_data_dir=str(data_dir))

    assert store.app_data_dir == data_dir
    assert (data_dir / "user_settings.json").exists()
    assert UserSettingsStore(pointer_dir=pointer_dir).app_data_dir == data_dir


def test_unreadable_settings_file_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "user_settings.json").write_text("{not json", encoding="utf-8")

    store = UserSettingsStore(pointer_dir=tmp_path)

    assert store.weights() == DEFAULT_ATTENDANCE_WEIGHTS


def test_clean_weights_clamps_and_drops_invalid_entries():
    assert clean_weights({"Late": 1.5, "Absent": -1, " ": 0.2, "Sick": None}) == {"Late": 1.0, "Absent": 0.0}
    assert clean_weights("Late=0.7") == DEFAULT_ATTENDANCE_WEIGHTS
