# services/prediction_client.py
"""
Client for the remote disaster classification service.

Every call is a multipart POST to one endpoint. The ``model`` field picks the
classifier; image models get the photo as ``file``, the text model gets the
report description as ``data``. The service answers with JSON carrying a
``predicted_label`` field.
"""

import logging
import os
from dataclasses import dataclass

import requests

from errors import PredictionError

logger = logging.getLogger(__name__)

DAMAGE_MODEL = "damage"
HUMANITARIAN_MODEL = "humanitarian"
TEXT_MODEL = "text"


@dataclass
class PredictionResult:
    severity: str
    humanitarian: str
    disaster_or_not: str


class PredictionClient:

    def __init__(self, url: str, timeout: float = 60, session: requests.Session = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _predict(self, model: str, file=None, data=None) -> str:
        # Plain fields go in as (None, value) parts so the body is always multipart
        form = {"model": (None, model)}
        if file is not None:
            form["file"] = file
        if data is not None:
            form["data"] = (None, data)

        logger.debug(f"Requesting {model} prediction from {self.url}")
        try:
            response = self.session.post(self.url, files=form, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise PredictionError(f"{model} prediction request failed: {e}")
        except ValueError:
            raise PredictionError(f"{model} prediction response is not JSON")

        label = payload.get("predicted_label") if isinstance(payload, dict) else None
        if not isinstance(label, str):
            raise PredictionError(f"{model} prediction response has no predicted_label")

        logger.debug(f"{model} prediction: {label}")
        return label

    def _predict_image(self, model: str, image_path: str) -> str:
        with open(image_path, "rb") as image:
            return self._predict(model, file=(os.path.basename(image_path), image))

    def predict_damage(self, image_path: str) -> str:
        return self._predict_image(DAMAGE_MODEL, image_path)

    def predict_humanitarian(self, image_path: str) -> str:
        return self._predict_image(HUMANITARIAN_MODEL, image_path)

    def predict_text(self, text: str) -> str:
        return self._predict(TEXT_MODEL, data=text or "")

    def classify(self, image_path: str, description: str) -> PredictionResult:
        """Run the three classifiers in order; any failure aborts the whole set"""
        return PredictionResult(
            severity=self.predict_damage(image_path),
            humanitarian=self.predict_humanitarian(image_path),
            disaster_or_not=self.predict_text(description),
        )
