import logging
from typing import Optional

from app.core.settings import settings
from .base import ReportStore
from .json_store import JsonFileReportStore

logger = logging.getLogger(__name__)

_store_instance: Optional[ReportStore] = None


def get_report_store() -> ReportStore:
    """
    Resolve the active report store based on settings.

    Rules:
    - Default: JSON file at REPORTS_FILE.
    - REPORT_STORE='firestore': Firestore `reports` collection.
      Initialization errors propagate; silently writing elsewhere would
      split report state across two stores.
    - Unknown REPORT_STORE values fall back to the JSON store with a warning.
    """
    global _store_instance
    if _store_instance is not None:
        return _store_instance

    backend = (settings.REPORT_STORE or "json").lower()

    if backend == "firestore":
        from .firestore_store import FirestoreReportStore

        _store_instance = FirestoreReportStore()
        logger.info("Report store initialized: firestore")
        return _store_instance

    if backend != "json":
        logger.warning(f"Unknown REPORT_STORE '{settings.REPORT_STORE}', falling back to json")

    _store_instance = JsonFileReportStore(settings.REPORTS_FILE)
    logger.info(f"Report store initialized: json ({settings.REPORTS_FILE})")
    return _store_instance


def reset_report_store() -> None:
    """Forget the resolved store so the next call re-reads settings."""
    global _store_instance
    _store_instance = None
