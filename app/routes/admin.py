"""
Admin endpoints - password-guarded maintenance actions.

SCOPE OF ADMIN:
✅ Clear every report (bulk reset of the demo board)

❌ NOT delete single reports
❌ NOT edit report content
❌ NOT change priority
"""

from fastapi import APIRouter

from app.models.base import BaseResponse
from app.models.report import ClearReportsRequest
from app.services import report_service

router = APIRouter(prefix="/api", tags=["Admin"])


class ClearReportsResponse(BaseResponse):
    cleared: int = 0


@router.post("/clear-reports", response_model=ClearReportsResponse)
async def clear_reports(request: ClearReportsRequest):
    """
    Remove all reports.

    Raises:
        403: Incorrect password (nothing is removed)
    """
    cleared = report_service.clear_reports(request.password)
    return ClearReportsResponse(message="All reports cleared", cleared=cleared)
