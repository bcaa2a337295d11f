"""
Report endpoints - API routes for report submission, retrieval and status actions.
"""

from typing import List, Optional
from fastapi import APIRouter, File, Form, Query, UploadFile, status
from pydantic import Field
import logging

from app.models.base import BaseResponse
from app.models.report import (
    CommentCreate,
    Report,
    ReportSummary,
    ResolveRequest,
)
from app.services import report_service
from app.services.dashboard_service import select_top_priority, summarize
from app.services.report_store import get_report_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reports"])


class ReportEnvelope(BaseResponse):
    report: Report


class TopPriorityResponse(BaseResponse):
    empty: bool
    top: Optional[Report] = None
    others: List[Report] = Field(default_factory=list)


class SweepResponse(BaseResponse):
    changed: int = 0


@router.post("/report", status_code=status.HTTP_201_CREATED, response_model=ReportEnvelope)
async def submit_report(
    location: Optional[str] = Form(None),
    report_type: Optional[str] = Form(None, alias="report-type"),
    description: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    accessibility: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """
    Submit a new report (multipart form with one photo).

    This endpoint:
    1. Validates the form fields and the photo
    2. Stores the photo under /uploads
    3. Assigns priority from the report type and stores the report

    Returns the created report with generated id.
    """
    logger.info(f"📝 POST /api/report - type={report_type}, location={location!r}")

    image_data = await image.read() if image is not None else None
    report = report_service.create_report(
        fields={
            "location": location,
            "type": report_type,
            "description": description,
            "size": size,
            "accessibility": accessibility,
            "name": name,
            "phone": phone,
        },
        image_name=image.filename if image is not None else None,
        image_content_type=image.content_type if image is not None else None,
        image_data=image_data,
    )
    return ReportEnvelope(message="Report submitted successfully", report=report)


@router.get("/reports", response_model=List[Report])
async def get_reports(
    report_type: Optional[str] = Query(None, alias="type", description="Report type, or 'all'"),
    sort: Optional[str] = Query(None, description="'priority' for most urgent first"),
):
    return report_service.list_reports(report_type=report_type, sort_by_priority=(sort == "priority"))


@router.get("/reports/top-priority", response_model=TopPriorityResponse)
async def get_top_priority(report_type: Optional[str] = Query(None, alias="type", description="Report type, or 'all'")):
    """
    The single most urgent report plus the remaining reports in priority order.
    `empty` is true when there are no reports.
    """
    selection = select_top_priority(get_report_store().list(), report_type=report_type)
    return TopPriorityResponse(
        message="No reports yet." if selection.empty else None,
        empty=selection.empty,
        top=selection.top,
        others=selection.others,
    )


@router.get("/reports/summary", response_model=ReportSummary)
async def get_summary():
    return summarize(get_report_store().list())


@router.post("/reports/sweep", response_model=SweepResponse)
async def sweep_statuses():
    """
    Advance every open report by one status (called by an external scheduler).
    """
    changed = report_service.run_status_sweep()
    return SweepResponse(message=f"{changed} report(s) advanced", changed=changed)


@router.get("/reports/{report_id}", response_model=Report)
async def get_report(report_id: int):
    return report_service.get_report(report_id)


@router.post("/reports/{report_id}/comments", response_model=ReportEnvelope)
async def add_comment(report_id: int, request: CommentCreate):
    report = report_service.add_comment(report_id, text=request.text, author=request.author)
    return ReportEnvelope(message="Comment added", report=report)


@router.post("/reports/{report_id}/resolve", response_model=ReportEnvelope)
async def resolve_report(report_id: int, request: Optional[ResolveRequest] = None):
    """
    Mark a report as Resolved. Already resolved reports are returned unchanged.
    """
    request = request or ResolveRequest()
    report = report_service.resolve_report(report_id, changed_by=request.changed_by, note=request.note)
    return ReportEnvelope(message="Report marked as resolved", report=report)
