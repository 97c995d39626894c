import json

import pytest

from cardio_risk.data.history import HistoryStore
from cardio_risk.data.storage import JsonFileStorage
from cardio_risk.utils.config import BASE_URL_ENV_VAR
from scripts.predict import main


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.delenv(BASE_URL_ENV_VAR, raising=False)
    config = tmp_path / "configs"
    config.mkdir()
    state = tmp_path / "state.json"
    (config / "client.yaml").write_text(f"storage:\n  path: {state.as_posix()}\n")
    return config, state


def test_history_lists_stored_predictions(config_dir, make_result, capsys):
    config, state = config_dir
    HistoryStore(JsonFileStorage(state)).insert(make_result("high"))

    assert main(["--config-dir", str(config), "history", "--risk-level", "high"]) == 0

    out = capsys.readouterr().out
    assert "pred-1" in out
    assert "1 of 1" in out


def test_export_writes_file(config_dir, make_result, tmp_path):
    config, state = config_dir
    HistoryStore(JsonFileStorage(state)).insert(make_result("low"))
    output = tmp_path / "history.json"

    assert main(["--config-dir", str(config), "export", "--format", "json", "--output", str(output)]) == 0

    exported = json.loads(output.read_text())
    assert [entry["id"] for entry in exported] == ["pred-1"]


def test_predict_reports_unreachable_service(config_dir, tmp_path, monkeypatch):
    config, _ = config_dir
    monkeypatch.setenv(BASE_URL_ENV_VAR, "http://127.0.0.1:9")
    input_path = tmp_path / "input.json"
    input_path.write_text(json.dumps({
        "age": 45,
        "gender": "female",
        "cholesterol": 190,
        "bloodPressureSystolic": 120,
        "bloodPressureDiastolic": 80,
    }))

    assert main(["--config-dir", str(config), "predict", str(input_path)]) == 1
