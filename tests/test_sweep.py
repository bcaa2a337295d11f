import asyncio
import importlib.util
from pathlib import Path

import pytest
import requests

from app.services.sweep_scheduler import start_sweep_task, stop_sweep_task
from conftest import make_report

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "sweep_statuses.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("sweep_statuses", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_disabled_interval_starts_nothing():
    assert start_sweep_task(0) is None


def test_background_loop_advances_reports(store):
    store.append(make_report(1))

    async def _run():
        task = start_sweep_task(1)
        assert task is not None
        await asyncio.sleep(1.5)
        await stop_sweep_task(task)
        assert task.cancelled()

    asyncio.run(_run())
    assert store.get(1).status != "Pending"


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def test_script_posts_to_sweep_endpoint(monkeypatch):
    script = _load_script()
    calls = []

    def _fake_post(url, timeout):
        calls.append((url, timeout))
        return _FakeResponse({"success": True, "changed": 4})

    monkeypatch.setattr(script.requests, "post", _fake_post)

    assert script.sweep_once("http://localhost:8000/", timeout=2.0) == 4
    assert calls == [("http://localhost:8000/api/reports/sweep", 2.0)]


def test_script_surfaces_http_errors(monkeypatch):
    script = _load_script()
    monkeypatch.setattr(script.requests, "post", lambda url, timeout: _FakeResponse({}, status_code=503))

    with pytest.raises(requests.HTTPError):
        script.sweep_once("http://localhost:8000")
