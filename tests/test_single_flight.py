# GoGoTime - OpenAPI export tests

import json
import threading
import time

import pytest

from scripts.export_openapi import SingleFlight, export_flight_for, export_openapi


def test_concurrent_calls_share_one_run():
    flight = SingleFlight()
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow():
        calls.append(1)
        started.set()
        release.wait(5)
        return {"value": 42}

    results = []

    def worker():
        results.append(flight.run(slow))

    leader = threading.Thread(target=worker)
    leader.start()
    assert started.wait(5)

    followers = [threading.Thread(target=worker) for _ in range(4)]
    for thread in followers:
        thread.start()

    deadline = time.monotonic() + 5
    while flight.waiting < 4 and time.monotonic() < deadline:
        time.sleep(0.01)

    assert flight.waiting == 4
    assert flight.in_flight
    release.set()

    for thread in [leader, *followers]:
        thread.join(5)

    assert len(calls) == 1
    assert flight.runs == 1
    assert len(results) == 5
    assert all(result is results[0] for result in results)
    assert not flight.in_flight


def test_exception_is_shared_and_next_call_runs_again():
    flight = SingleFlight()

    def boom():
        raise RuntimeError("generation failed")

    with pytest.raises(RuntimeError):
        flight.run(boom)

    assert flight.run(lambda: "ok") == "ok"
    assert flight.runs == 2
    assert flight.last_finished_at is not None


def test_export_writes_document(tmp_path):
    output = tmp_path / "docs" / "openapi.json"

    path = export_openapi(output, builder=lambda: {"openapi": "3.1.0", "paths": {}})

    assert path == output
    assert json.loads(output.read_text(encoding="utf-8"))["openapi"] == "3.1.0"


def test_real_document_lists_routes(tmp_path):
    output = export_openapi(tmp_path / "openapi.json")
    document = json.loads(output.read_text(encoding="utf-8"))

    assert "/timesheets/{timesheet_id}/approve" in document["paths"]
    assert "/auth/login" in document["paths"]


def test_exports_to_different_paths_both_write(tmp_path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    started = threading.Event()
    release = threading.Event()

    def slow_builder():
        started.set()
        release.wait(5)
        return {"openapi": "3.1.0", "info": {"title": "first"}}

    worker = threading.Thread(target=export_openapi, args=(first,), kwargs={"builder": slow_builder})
    worker.start()
    assert started.wait(5)

    try:
        path = export_openapi(second, builder=lambda: {"openapi": "3.1.0", "info": {"title": "second"}})
    finally:
        release.set()
        worker.join(5)

    assert path == second
    assert json.loads(second.read_text(encoding="utf-8"))["info"]["title"] == "second"
    assert json.loads(first.read_text(encoding="utf-8"))["info"]["title"] == "first"


def test_same_path_shares_a_flight(tmp_path):
    assert export_flight_for(tmp_path / "a.json") is export_flight_for(tmp_path / "." / "a.json")
    assert export_flight_for(tmp_path / "a.json") is not export_flight_for(tmp_path / "b.json")
