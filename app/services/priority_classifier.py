"""
Report Classifier - maps a report type to a priority tier and orders reports.

DESIGN PRINCIPLES:
- One authoritative type -> priority table (overridable from settings)
- Total: unknown or missing types fall back to Medium, never raise
- Priority is assigned once at creation; a stored priority wins over the table
- Ordering is stable: equal priorities keep their input order
"""

from typing import Dict, Iterable, List, Mapping, Optional
import logging

from app.core.settings import settings
from app.models.report import Priority, Report, ReportType

logger = logging.getLogger(__name__)


DEFAULT_PRIORITY = Priority.MEDIUM

# Type -> priority. animal-adopt has been both High and Low in the past;
# High is the default, set PRIORITY_OVERRIDES to change it.
DEFAULT_PRIORITY_MAP: Dict[str, Priority] = {
    ReportType.HAZARDOUS.value: Priority.CRITICAL,
    ReportType.ANIMAL_DEATH.value: Priority.HIGH,
    ReportType.ANIMAL_CARE.value: Priority.HIGH,
    ReportType.ANIMAL_ADOPT.value: Priority.HIGH,
    ReportType.GARBAGE.value: Priority.MEDIUM,
    ReportType.CLEANING.value: Priority.MEDIUM,
    ReportType.RECYCLING.value: Priority.MEDIUM,
    ReportType.OTHER.value: Priority.MEDIUM,
}

# Ascending rank = more urgent first
PRIORITY_RANK: Dict[Priority, int] = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


def _as_priority(label: Optional[str]) -> Optional[Priority]:
    if isinstance(label, Priority):
        return label
    try:
        return Priority(label)
    except ValueError:
        return None


class ReportClassifier:
    """
    Deterministic type -> priority classification and priority ordering.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.priority_map: Dict[str, Priority] = dict(DEFAULT_PRIORITY_MAP)
        for report_type, label in (overrides or {}).items():
            priority = _as_priority(label)
            if priority is None:
                raise ValueError(
                    f"Invalid priority override {report_type!r} -> {label!r}. "
                    f"Allowed priorities: {[p.value for p in Priority]}"
                )
            self.priority_map[report_type] = priority
        if overrides:
            logger.info(f"Priority table overrides applied: {dict(overrides)}")

    def classify(self, report_type: Optional[str]) -> Priority:
        """Priority for a report type. Unrecognised types are Medium."""
        if isinstance(report_type, ReportType):
            report_type = report_type.value
        if not isinstance(report_type, str):
            return DEFAULT_PRIORITY
        return self.priority_map.get(report_type, DEFAULT_PRIORITY)

    @staticmethod
    def rank(priority: str) -> int:
        """Position of a priority label in the urgency order (0 = Critical)."""
        parsed = _as_priority(priority)
        if parsed is None:
            return PRIORITY_RANK[DEFAULT_PRIORITY]
        return PRIORITY_RANK[parsed]

    def effective_priority(self, report: Report) -> Priority:
        """
        Stored priority when it is a known label, otherwise derived from type.
        """
        stored = _as_priority(report.priority) if report.priority else None
        if stored is not None:
            return stored
        return self.classify(report.type)

    def sort_key(self, report: Report) -> int:
        return PRIORITY_RANK[self.effective_priority(report)]

    def compare(self, a: Report, b: Report) -> int:
        """Negative if a is more urgent than b, 0 if equal, positive otherwise."""
        return self.sort_key(a) - self.sort_key(b)

    def sort_reports(self, reports: Iterable[Report]) -> List[Report]:
        """Most urgent first. sorted() is stable, so ties keep input order."""
        return sorted(reports, key=self.sort_key)


# Global classifier instance (singleton pattern)
_classifier: Optional[ReportClassifier] = None


def get_report_classifier() -> ReportClassifier:
    """
    Get or create the ReportClassifier singleton, built from settings.
    """
    global _classifier
    if _classifier is None:
        _classifier = ReportClassifier(overrides=settings.PRIORITY_OVERRIDES)
    return _classifier


def reset_report_classifier() -> None:
    global _classifier
    _classifier = None
