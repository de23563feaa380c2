import json

from offer_model.state.history import (
    BestDealHistory,
    InMemoryBestDealHistory,
    JsonFileBestDealHistory,
)


def test_in_memory_history():
    history = InMemoryBestDealHistory()
    assert history.get() is None
    history.set(4)
    assert history.get() == 4.0
    assert isinstance(history, BestDealHistory)


def test_json_file_history_writes_expected_shape(tmp_path):
    path = tmp_path / "nested" / "previous.json"
    history = JsonFileBestDealHistory(path)
    assert history.get() is None

    history.set(5.25)

    assert json.loads(path.read_text()) == {"metrics": {"totalDeal": {"value": 5.25}}}
    assert history.get() == 5.25
    assert isinstance(history, BestDealHistory)


def test_json_file_history_reads_saved_calculation_data(tmp_path):
    path = tmp_path / "previous.json"
    path.write_text(json.dumps({"metrics": {"totalDeal": {"value": "4.5", "change": 3}}, "other": 1}))
    assert JsonFileBestDealHistory(path).get() == 4.5


def test_json_file_history_tolerates_bad_content(tmp_path, caplog):
    path = tmp_path / "previous.json"

    path.write_text("{not json")
    assert JsonFileBestDealHistory(path).get() is None

    path.write_text(json.dumps({"metrics": {}}))
    assert JsonFileBestDealHistory(path).get() is None

    path.write_text(json.dumps(["metrics"]))
    assert JsonFileBestDealHistory(path).get() is None

    path.write_text(json.dumps({"metrics": {"totalDeal": {"value": "lots"}}}))
    assert JsonFileBestDealHistory(path).get() is None

    assert "previous" in caplog.text
