# routers/reports.py
from fastapi import APIRouter, UploadFile, File, Depends, Form
from pydantic import FiniteFloat
from typing import Optional, List
import logging
import os
import shutil
import time

from config import VARIANT_PREDICTION
from dependencies import get_prediction_client, get_report_store, get_upload_dir
from errors import ValidationError
from schemas import ReportOut, MessageResponse
from services.prediction_client import PredictionClient
from services.report_store import ReportStore, DEFAULT_STATUS
from services.urgency import get_urgency_level

router = APIRouter(prefix="/user", tags=["Reports"])

MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB

logger = logging.getLogger(__name__)

def validate_image_file(image: Optional[UploadFile]) -> None:
    """Reject a missing, unnamed or oversized upload"""
    if image is None or not image.filename:
        raise ValidationError("Image file is required.")

    # Check file size
    image.file.seek(0, os.SEEK_END)
    size = image.file.tell()
    image.file.seek(0)
    if size > MAX_FILE_SIZE:
        raise ValidationError(f"File too large. Maximum size: {MAX_FILE_SIZE // (1024*1024)}MB")

def save_upload(image: UploadFile, upload_dir: str) -> str:
    """Store the upload as <timestamp-ms>-<original name> and return that filename"""
    original_name = os.path.basename(image.filename.replace("\\", "/"))
    timestamp = int(time.time() * 1000)

    os.makedirs(upload_dir, exist_ok=True)
    while True:
        filename = f"{timestamp}-{original_name}"
        try:
            buffer = open(os.path.join(upload_dir, filename), "xb")
        except FileExistsError:
            # Same name uploaded within the same millisecond
            timestamp += 1
            continue
        try:
            with buffer:
                shutil.copyfileobj(image.file, buffer)
        except Exception:
            # No partial photo is left behind
            os.remove(os.path.join(upload_dir, filename))
            raise
        return filename

@router.post(
    "/report/",
    response_model=ReportOut,
    response_model_exclude_unset=True,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
def submit_report(
    image: Optional[UploadFile] = File(None),
    latitude: Optional[FiniteFloat] = Form(None),
    longitude: Optional[FiniteFloat] = Form(None),
    location: str = Form(""),
    description: str = Form(""),
    store: ReportStore = Depends(get_report_store),
    predictor: Optional[PredictionClient] = Depends(get_prediction_client),
    upload_dir: str = Depends(get_upload_dir),
):
    """
    Store a new incident report.
    - prediction deployments classify the photo and description first
    - status deployments store the report as not_resolved
    """
    validate_image_file(image)

    image_filename = save_upload(image, upload_dir)
    image_path = os.path.join(upload_dir, image_filename)

    record = {
        "image_filename": image_filename,
        "latitude": latitude,
        "longitude": longitude,
        "location": location,
        "description": description,
    }

    try:
        if store.variant == VARIANT_PREDICTION:
            prediction = predictor.classify(image_path, description)
            record.update(
                severity=prediction.severity,
                humanitarian=prediction.humanitarian,
                disaster_or_not=prediction.disaster_or_not,
                urgency_level=get_urgency_level(prediction.humanitarian, prediction.severity),
            )
        else:
            record["status"] = DEFAULT_STATUS

        report = store.append(record)

    except Exception:
        # Nothing is kept for a report that was not stored
        if os.path.exists(image_path):
            os.remove(image_path)
        raise

    logger.info(f"Report {report['id']} submitted for {location!r} ({latitude}, {longitude})")
    return report

@router.get("/reports/", response_model=List[ReportOut], response_model_exclude_unset=True)
def get_reports(store: ReportStore = Depends(get_report_store)):
    """Get every stored report in submission order"""
    return store.read_all()

@router.get(
    "/reports/{report_id}",
    response_model=ReportOut,
    response_model_exclude_unset=True,
    responses={404: {"model": MessageResponse}},
)
def get_report(report_id: int, store: ReportStore = Depends(get_report_store)):
    """Get specific report by ID"""
    return store.get(report_id)
