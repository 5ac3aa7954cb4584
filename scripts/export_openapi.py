#!/usr/bin/env python
"""
GoGoTime - OpenAPI Export

Writes the API's OpenAPI document to a JSON file for client generators.

Usage:
    python -m scripts.export_openapi                 # writes openapi.json
    python -m scripts.export_openapi docs/api.json   # custom path
"""

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("openapi.json")


class _Call:
    """One in-flight run and its outcome."""

    def __init__(self):
        self.done = threading.Event()
        self.result: Any = None
        self.error: Optional[BaseException] = None

    def outcome(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.result


class SingleFlight:
    """
    Collapses concurrent calls into one run.

    The first caller runs the function; callers arriving while it runs
    wait for it and receive the same result (or the same exception)
    instead of starting a second run. The next call after it finishes
    starts a fresh run.

    Usage:
        flight = SingleFlight()
        result = flight.run(expensive_export)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._call: Optional[_Call] = None
        self.runs = 0
        self.waiting = 0
        self.last_finished_at: Optional[datetime] = None

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._call is not None

    def run(self, fn: Callable[[], Any]) -> Any:
        with self._lock:
            call = self._call
            leader = call is None
            if leader:
                call = self._call = _Call()
                self.runs += 1
            else:
                self.waiting += 1

        if not leader:
            try:
                call.done.wait()
            finally:
                with self._lock:
                    self.waiting -= 1
            return call.outcome()

        try:
            call.result = fn()
        except Exception as exc:
            call.error = exc
        finally:
            with self._lock:
                self._call = None
                self.last_finished_at = datetime.now(timezone.utc)
            call.done.set()

        return call.outcome()


# One flight per destination file
_export_flights: dict[Path, SingleFlight] = {}
_export_flights_lock = threading.Lock()


def export_flight_for(output: Path) -> SingleFlight:
    key = Path(output).resolve()
    with _export_flights_lock:
        return _export_flights.setdefault(key, SingleFlight())


def build_openapi() -> dict:
    """OpenAPI document of the application, as FastAPI renders it."""
    from gogotime.main import create_app

    return create_app().openapi()


def export_openapi(output: Path = DEFAULT_OUTPUT, builder: Callable[[], dict] = build_openapi) -> Path:
    """
    Write the OpenAPI document to ``output``.

    Concurrent exports to the same path share one generation and one
    write; exports to different paths run independently.
    """
    output = Path(output)

    def _generate() -> Path:
        logger.info("Generating OpenAPI document into %s", output)
        document = builder()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(document, indent=2, sort_keys=True), encoding="utf-8")
        return output

    return export_flight_for(output).run(_generate)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUTPUT
    path = export_openapi(output)
    print(f"OpenAPI document written to {path}")


if __name__ == "__main__":
    main()
