# dependencies.py
# FastAPI dependencies shared by the routers
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from services.prediction_client import PredictionClient
from services.report_store import ReportStore
from services.user_directory import UserDirectory


def get_report_store(request: Request) -> ReportStore:
    return request.app.state.report_store


def get_prediction_client(request: Request) -> PredictionClient:
    return request.app.state.prediction_client


def get_upload_dir(request: Request) -> str:
    return request.app.state.settings.upload_dir


def get_user_directory(db: Session = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)
