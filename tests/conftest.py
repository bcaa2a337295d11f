from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.core.settings import settings
from app.models.report import Report
from app.services.image_service import reset_image_service
from app.services.priority_classifier import reset_report_classifier
from app.services.report_store import get_report_store, reset_report_store

ADMIN_PASSWORD = "test-admin-password"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _reset_singletons():
    reset_report_store()
    reset_image_service()
    reset_report_classifier()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every store at a temp directory and reset cached services."""
    monkeypatch.setattr(settings, "REPORT_STORE", "json")
    monkeypatch.setattr(settings, "REPORTS_FILE", str(tmp_path / "uploads" / "reports.json"))
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "PRIORITY_OVERRIDES", {})
    monkeypatch.setattr(settings, "SWEEP_INTERVAL_SECONDS", 0)
    _reset_singletons()
    yield tmp_path
    _reset_singletons()


@pytest.fixture
def store():
    return get_report_store()


@pytest.fixture
def client():
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


def make_report(
    report_id: int,
    report_type: str = "garbage",
    priority: Optional[str] = None,
    status: str = "Pending",
    **extra,
) -> Report:
    return Report(
        id=report_id,
        location=extra.pop("location", "Main Street"),
        type=report_type,
        description=extra.pop("description", "Pile of rubbish next to the school gate"),
        image=extra.pop("image", f"/uploads/report-{report_id}.jpg"),
        priority=priority,
        status=status,
        **extra,
    )


def valid_form(**overrides) -> dict:
    form = {
        "location": "Behind the bus depot",
        "report-type": "garbage",
        "description": "Overflowing bins left uncollected for a week.",
    }
    form.update(overrides)
    return form
