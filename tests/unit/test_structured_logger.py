"""Tests for the JSONL performance logger."""

import json
import threading

from itinerary_optimizer import config
from itinerary_optimizer.modules.observability.logger import StructuredLogger, default_logs_dir


def test_appends_one_json_object_per_line(tmp_path) -> None:
    perf = StructuredLogger(tmp_path, enabled=True)
    perf.log("sess_1", "PERFORMANCE", {"duration_ms": 12.5})
    perf.log("sess_1", "DAY_FAILURE", {"day_number": 2})
    perf.close()

    lines = (tmp_path / "sess_1.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["event_type"] for r in records] == ["PERFORMANCE", "DAY_FAILURE"]
    assert records[0]["session_id"] == "sess_1"
    assert records[0]["payload"] == {"duration_ms": 12.5}
    assert "timestamp" in records[0]


def test_disabled_logger_writes_nothing(tmp_path) -> None:
    perf = StructuredLogger(tmp_path, enabled=False)
    perf.log("sess_2", "PERFORMANCE", {})
    assert list(tmp_path.iterdir()) == []


def test_concurrent_writes_are_not_interleaved(tmp_path) -> None:
    perf = StructuredLogger(tmp_path, enabled=True)

    def worker(n: int) -> None:
        for i in range(50):
            perf.log("shared", "PERFORMANCE", {"worker": n, "i": i})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    perf.close("shared")

    lines = (tmp_path / "shared.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 200
    assert all(json.loads(line)["event_type"] == "PERFORMANCE" for line in lines)


def test_close_releases_only_that_session(tmp_path) -> None:
    perf = StructuredLogger(tmp_path, enabled=True)
    perf.log("a", "PERFORMANCE", {})
    perf.log("b", "PERFORMANCE", {})

    perf.close("a")
    assert list(perf._handles) == ["b"]

    perf.close()
    assert perf._handles == {}


def test_default_dir_is_relative_to_working_directory(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "PERF_LOG_DIR", "")
    monkeypatch.chdir(tmp_path)

    assert default_logs_dir().resolve() == (tmp_path / "logs").resolve()

    monkeypatch.setattr(config, "PERF_LOG_DIR", str(tmp_path / "perf"))
    assert default_logs_dir() == tmp_path / "perf"
