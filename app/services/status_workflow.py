"""
Status Workflow Engine - report lifecycle state machine.

DESIGN PRINCIPLES:
- No backward transitions
- The sweep moves one step at a time; a manual resolve may jump to Resolved
- Transitions out of the terminal state are no-ops, not errors
- All changes logged in status_history
"""

from enum import Enum
from typing import Dict, Iterable, Optional
import logging

from app.models.report import Report, StatusHistoryEntry

logger = logging.getLogger(__name__)


class ReportStatus(str, Enum):
    """
    Report lifecycle.

    PENDING → ACKNOWLEDGED → IN_PROGRESS → RESOLVED
    """
    PENDING = "Pending"              # Initial state, just submitted
    ACKNOWLEDGED = "Acknowledged"    # Seen by the clean-up team
    IN_PROGRESS = "In Progress"      # Clean-up under way
    RESOLVED = "Resolved"            # Final state


class StatusWorkflowEngine:
    """
    State machine for report status transitions.

    Rules:
    - The sweep advances exactly one step
    - Any open report may be forced to RESOLVED
    - RESOLVED has no outgoing transition
    """

    # Sweep successor map: {from_status: to_status}
    SWEEP_TRANSITIONS: Dict[ReportStatus, Optional[ReportStatus]] = {
        ReportStatus.PENDING: ReportStatus.ACKNOWLEDGED,
        ReportStatus.ACKNOWLEDGED: ReportStatus.IN_PROGRESS,
        ReportStatus.IN_PROGRESS: ReportStatus.RESOLVED,
        ReportStatus.RESOLVED: None,  # Terminal state
    }

    @staticmethod
    def _parse(status: str) -> Optional[ReportStatus]:
        try:
            return ReportStatus(status)
        except ValueError:
            return None

    @classmethod
    def next_status(cls, current_status: str) -> Optional[str]:
        """
        Status the sweep would move a report to, or None if it stays put.
        """
        current = cls._parse(current_status)
        if current is None:
            return None
        successor = cls.SWEEP_TRANSITIONS.get(current)
        return successor.value if successor else None

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if a status transition is valid.

        Args:
            from_status: Current status
            to_status: Desired new status

        Returns:
            True for a same-status no-op, the sweep successor,
            or a jump from any status to RESOLVED
        """
        from_enum = cls._parse(from_status)
        to_enum = cls._parse(to_status)
        if to_enum is None:
            return False

        if to_enum == ReportStatus.RESOLVED:
            return True

        if from_enum is None:
            return False

        if from_enum == to_enum:
            return True

        return cls.SWEEP_TRANSITIONS.get(from_enum) == to_enum

    @staticmethod
    def create_status_history_entry(
        from_status: str,
        to_status: str,
        changed_by: str,
        note: Optional[str] = None
    ) -> StatusHistoryEntry:
        """
        Create a status history entry for the audit trail.
        """
        return StatusHistoryEntry(
            from_status=from_status,
            to_status=to_status,
            changed_by=changed_by,
            note=note or "",
        )

    @classmethod
    def _apply(cls, report: Report, new_status: str, changed_by: str, note: Optional[str]) -> None:
        if not cls.is_valid_transition(report.status, new_status):
            raise ValueError(f"Invalid status transition {report.status!r} -> {new_status!r}")
        entry = cls.create_status_history_entry(report.status, new_status, changed_by, note)
        report.status_history.append(entry)
        report.status = new_status

    @classmethod
    def advance(cls, report: Report, changed_by: str = "sweep") -> bool:
        """
        Apply one sweep step to a report in place.

        Returns:
            True if the status changed. RESOLVED and unknown statuses are left alone.
        """
        successor = cls.next_status(report.status)
        if successor is None:
            if cls._parse(report.status) is None:
                logger.warning(f"Report {report.id} has unknown status {report.status!r}, sweep skipped")
            return False

        cls._apply(report, successor, changed_by, note="Automatic status sweep")
        return True

    @classmethod
    def resolve(cls, report: Report, changed_by: str = "user", note: Optional[str] = None) -> bool:
        """
        Force a report to RESOLVED, skipping intermediate states.

        Returns:
            True if the status changed, False if it was already RESOLVED.
        """
        if report.status == ReportStatus.RESOLVED.value:
            return False

        cls._apply(report, ReportStatus.RESOLVED.value, changed_by, note=note or "Marked as resolved")
        return True

    @classmethod
    def sweep(cls, reports: Iterable[Report]) -> int:
        """
        Advance every report one step.

        Returns:
            Number of reports whose status changed
        """
        return sum(1 for report in reports if cls.advance(report))
