"""
Dashboard Service - top-priority selection, type filtering and summaries.

Pure functions over a snapshot of reports; nothing here writes to the store.
"""

from collections import Counter
from typing import Iterable, List, Optional

from app.models.report import Report, ReportSummary, TopPrioritySelection
from app.services.priority_classifier import ReportClassifier, get_report_classifier

ALL_TYPES = "all"


def filter_by_type(reports: Iterable[Report], report_type: Optional[str] = None) -> List[Report]:
    """Keep reports of one type. None, "" or "all" keeps everything."""
    if not report_type or report_type == ALL_TYPES:
        return list(reports)
    return [report for report in reports if report.type == report_type]


def select_top_priority(
    reports: Iterable[Report],
    report_type: Optional[str] = None,
    classifier: Optional[ReportClassifier] = None,
) -> TopPrioritySelection:
    """
    Pick the single most urgent report and return it with the remaining ones.

    An empty collection gives an empty selection (top is None), not an error.
    """
    classifier = classifier or get_report_classifier()
    ordered = classifier.sort_reports(filter_by_type(reports, report_type))
    if not ordered:
        return TopPrioritySelection()
    return TopPrioritySelection(top=ordered[0], others=ordered[1:])


def summarize(
    reports: Iterable[Report],
    classifier: Optional[ReportClassifier] = None,
) -> ReportSummary:
    classifier = classifier or get_report_classifier()
    reports = list(reports)
    return ReportSummary(
        total=len(reports),
        by_type=dict(Counter(report.type for report in reports)),
        by_status=dict(Counter(report.status for report in reports)),
        by_priority=dict(Counter(classifier.effective_priority(report).value for report in reports)),
    )
