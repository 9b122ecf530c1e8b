# config.py
# Environment driven settings for the report service
from dataclasses import dataclass, field
from typing import List
from pathlib import Path
import os

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

VARIANT_PREDICTION = "prediction"
VARIANT_STATUS = "status"
VARIANTS = (VARIANT_PREDICTION, VARIANT_STATUS)


def _origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    variant: str = field(default_factory=lambda: os.getenv("REPORT_VARIANT", VARIANT_PREDICTION))
    reports_csv: str = field(default_factory=lambda: os.getenv("REPORTS_CSV", "reports.csv"))
    upload_dir: str = field(default_factory=lambda: os.getenv("UPLOAD_DIR", "uploaded_images"))
    prediction_url: str = field(
        default_factory=lambda: os.getenv("PREDICTION_URL", "http://localhost:5000/predict")
    )
    prediction_timeout: float = field(
        default_factory=lambda: float(os.getenv("PREDICTION_TIMEOUT", "60"))
    )
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite://"))
    cors_origins: List[str] = field(default_factory=lambda: _origins(os.getenv("CORS_ORIGINS", "*")))

    def __post_init__(self):
        self.variant = self.variant.strip().lower()
        if self.variant not in VARIANTS:
            raise ValueError(
                f"Unknown REPORT_VARIANT '{self.variant}'. Must be one of: {', '.join(VARIANTS)}"
            )

    @property
    def predictions_enabled(self) -> bool:
        return self.variant == VARIANT_PREDICTION


def get_settings() -> Settings:
    """Build settings from the current environment"""
    return Settings()
