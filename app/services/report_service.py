"""
Report service - Business logic for community waste reports.

DESIGN NOTE:
- Every write goes through the report store (single source of truth)
- Priority is assigned once at creation and stored
- Validation happens before anything is written
"""

from typing import Dict, List, Optional
import logging

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.core.settings import settings
from app.models.report import (
    ANONYMOUS,
    NOT_PROVIDED,
    NOT_SPECIFIED,
    Comment,
    Report,
    ReportCreate,
)
from app.services.dashboard_service import filter_by_type
from app.services.image_service import get_image_service
from app.services.priority_classifier import get_report_classifier
from app.services.report_store import ReportStore, get_report_store
from app.services.status_workflow import ReportStatus, StatusWorkflowEngine
from app.utils.security import verify_admin_password

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "request"
        messages.append(f"{field}: {error.get('msg')}")
    return "; ".join(messages)


def validate_submission(fields: Dict[str, Optional[str]]) -> ReportCreate:
    """
    Validate the text fields of a submission.

    Raises:
        ValidationError: with a readable summary of every failing field
    """
    try:
        return ReportCreate(**fields)
    except PydanticValidationError as e:
        raise ValidationError(_format_validation_errors(e), details=e.errors(include_url=False)) from e


def create_report(
    fields: Dict[str, Optional[str]],
    image_name: Optional[str],
    image_content_type: Optional[str],
    image_data: Optional[bytes],
    store: Optional[ReportStore] = None,
) -> Report:
    """
    Create a new report and store it.

    Flow:
    1. Validate text fields and require exactly one photo
    2. Save the photo
    3. Classify priority from type
    4. Append to the report store

    Args:
        fields: location, type, description, size, accessibility, name, phone
        image_name / image_content_type / image_data: the uploaded photo

    Returns:
        Report: The stored report with generated id and timestamp
    """
    store = store or get_report_store()

    submission = validate_submission(fields)
    if image_data is None:
        raise ValidationError("No image uploaded")

    images = get_image_service()
    image = images.save_image(image_name or "", image_content_type, image_data)

    try:
        report = _build_report(submission, image.url, store)
        store.append(report)
    except Exception as e:
        logger.error(f"Failed to save report, removing image {image.id}: {e}", exc_info=True)
        images.delete_image(image.id)
        raise

    logger.info(f"✅ Report {report.id} created: type={report.type}, priority={report.priority}")
    return report


def _build_report(submission: ReportCreate, image_url: str, store: ReportStore) -> Report:
    report_type = submission.type.value
    priority = get_report_classifier().classify(report_type)
    initial_status = ReportStatus.PENDING.value

    return Report(
        id=store.next_id(),
        location=submission.location,
        type=report_type,
        description=submission.description,
        size=submission.size or NOT_SPECIFIED,
        accessibility=submission.accessibility or NOT_SPECIFIED,
        name=submission.name or ANONYMOUS,
        phone=submission.phone or NOT_PROVIDED,
        image=image_url,
        status=initial_status,
        priority=priority.value,
        status_history=[
            StatusWorkflowEngine.create_status_history_entry(
                from_status="",
                to_status=initial_status,
                changed_by="system",
                note="Report created",
            )
        ],
    )


def list_reports(
    report_type: Optional[str] = None,
    sort_by_priority: bool = False,
    store: Optional[ReportStore] = None,
) -> List[Report]:
    """
    All reports, optionally filtered by type and ordered most urgent first.
    Without sorting, reports come back in submission order.
    """
    store = store or get_report_store()
    reports = filter_by_type(store.list(), report_type)
    if sort_by_priority:
        reports = get_report_classifier().sort_reports(reports)
    return reports


def get_report(report_id: int, store: Optional[ReportStore] = None) -> Report:
    store = store or get_report_store()
    return store.get(report_id)


def add_comment(
    report_id: int,
    text: str,
    author: Optional[str] = None,
    store: Optional[ReportStore] = None,
) -> Report:
    """
    Append a comment to a report's comment trail.

    Raises:
        ValidationError: empty comment text
        NotFoundError: unknown report id
    """
    store = store or get_report_store()

    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment text must not be empty")

    comment = Comment(text=text, author=(author or "").strip() or ANONYMOUS)

    def _append(report: Report) -> bool:
        report.comments.append(comment)
        return True

    report = store.update(report_id, _append)
    logger.info(f"Comment added to report {report_id} ({len(report.comments)} total)")
    return report


def resolve_report(
    report_id: int,
    changed_by: Optional[str] = None,
    note: Optional[str] = None,
    store: Optional[ReportStore] = None,
) -> Report:
    """
    Mark a report as Resolved, skipping any intermediate states.
    Resolving an already resolved report is a no-op.
    """
    store = store or get_report_store()

    def _resolve(report: Report) -> bool:
        return StatusWorkflowEngine.resolve(report, changed_by=changed_by or "user", note=note)

    report = store.update(report_id, _resolve)
    logger.info(f"Report {report_id} resolved by {changed_by or 'user'}")
    return report


def run_status_sweep(store: Optional[ReportStore] = None) -> int:
    """
    One automatic sweep tick: advance every open report by one status.

    Returns:
        Number of reports whose status changed
    """
    store = store or get_report_store()
    changed = store.update_all(StatusWorkflowEngine.advance)
    logger.info(f"Status sweep advanced {changed} report(s)")
    return changed


def clear_reports(password: Optional[str], store: Optional[ReportStore] = None) -> int:
    """
    Remove every report (administrative bulk clear).

    Raises:
        AuthorizationError: wrong password; nothing is removed
    """
    store = store or get_report_store()
    verify_admin_password(password, settings.ADMIN_PASSWORD)
    removed = store.clear()
    logger.warning(f"All reports cleared by admin ({removed} removed)")
    return removed
