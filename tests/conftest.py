# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import model  # noqa: F401  registers the users table
from config import Settings, VARIANT_PREDICTION, VARIANT_STATUS
from database import Base, create_engine_with_retry
from dependencies import get_prediction_client
from main import create_app
from services.prediction_client import PredictionResult


class FakePredictionClient:
    """Stands in for the remote classifier and records what it was asked"""

    def __init__(self, severity="severe", humanitarian="affected_injured_or_dead_people",
                 disaster_or_not="disaster", error=None):
        self.result = PredictionResult(
            severity=severity, humanitarian=humanitarian, disaster_or_not=disaster_or_not
        )
        self.error = error
        self.calls = []

    def classify(self, image_path, description):
        self.calls.append((image_path, description))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def db_engine():
    engine = create_engine_with_retry("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def fake_predictor():
    return FakePredictionClient()


def build_app(tmp_path, variant, predictor=None, database_url="sqlite://"):
    settings = Settings(
        variant=variant,
        reports_csv=str(tmp_path / "reports.csv"),
        upload_dir=str(tmp_path / "uploaded_images"),
        database_url=database_url,
    )
    app = create_app(settings)
    if predictor is not None:
        app.dependency_overrides[get_prediction_client] = lambda: predictor
    return app


@pytest.fixture
def status_client(tmp_path):
    app = build_app(tmp_path, VARIANT_STATUS)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def predicting_client(tmp_path, fake_predictor):
    app = build_app(tmp_path, VARIANT_PREDICTION, predictor=fake_predictor)
    with TestClient(app) as client:
        yield client
