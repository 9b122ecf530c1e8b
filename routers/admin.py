# routers/admin.py
from fastapi import APIRouter, Depends
import logging

from dependencies import get_report_store
from schemas import StatusUpdate, StatusUpdateResponse, MessageResponse
from services.report_store import ReportStore

router = APIRouter(prefix="/admin", tags=["Admin"])

logger = logging.getLogger(__name__)

@router.put(
    "/report/{report_id}/status",
    response_model=StatusUpdateResponse,
    response_model_exclude_unset=True,
    responses={404: {"model": MessageResponse}},
)
def update_report_status(
    report_id: int,
    update: StatusUpdate,
    store: ReportStore = Depends(get_report_store),
):
    """Update report status (for authorities)"""
    report = store.update_status(report_id, update.status)
    return {
        "message": f"Report {report_id} status updated to {update.status}",
        "report": report,
    }
