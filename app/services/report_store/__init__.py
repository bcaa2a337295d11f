"""
Report Store - the single writer for report state.

JSON file by default, Firestore when REPORT_STORE=firestore.
"""

from app.services.report_store.base import ReportMutator, ReportStore
from app.services.report_store.json_store import JsonFileReportStore
from app.services.report_store.registry import get_report_store, reset_report_store

__all__ = [
    "ReportMutator",
    "ReportStore",
    "JsonFileReportStore",
    "get_report_store",
    "reset_report_store",
]
