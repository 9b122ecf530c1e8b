# services/report_store.py
"""
Flat-file report storage.

Reports live in a single CSV file: one header row followed by one row per
report, in submission order. The header depends on the deployment variant:

- prediction: id,image_filename,latitude,longitude,location,description,
  severity,humanitarian,disaster_or_not,urgency_level
- status:     id,image_filename,latitude,longitude,location,description,status

Fields are written with the csv module, so commas, quotes, carriage returns
and newlines in user supplied text are quoted instead of breaking the column layout.
"""

import csv
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from config import VARIANT_PREDICTION, VARIANT_STATUS
from errors import NotFoundError, StoreCorruptedError, ValidationError

logger = logging.getLogger(__name__)

BASE_COLUMNS = ["id", "image_filename", "latitude", "longitude", "location", "description"]

COLUMNS = {
    VARIANT_PREDICTION: BASE_COLUMNS + ["severity", "humanitarian", "disaster_or_not", "urgency_level"],
    VARIANT_STATUS: BASE_COLUMNS + ["status"],
}

DEFAULT_STATUS = "not_resolved"

INTEGER_COLUMNS = {"id"}
FLOAT_COLUMNS = {"latitude", "longitude"}

# Rows end with "\r\n", so any field holding "\r" or "\n" gets quoted.
# Rewrites use the same options, so untouched rows stay byte-identical.
CSV_OPTIONS = {"lineterminator": "\r\n"}


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class ReportStore:
    """Append-only CSV report file with in-place status updates"""

    def __init__(self, path: str, variant: str):
        if variant not in COLUMNS:
            raise ValueError(f"Unknown report variant: {variant}")

        self.path = Path(path)
        self.variant = variant
        self.columns = COLUMNS[variant]
        # Guards every read-modify-write cycle on the file
        self._lock = threading.Lock()
        self._last_id: Optional[int] = None

    @property
    def supports_status(self) -> bool:
        return "status" in self.columns

    # ---------- file handling ----------

    def initialize(self) -> None:
        """Create the file with its header row, or check the header of an existing one"""
        with self._lock:
            self._ensure_file()

    def _ensure_file(self) -> None:
        # An empty file has no rows yet, so it only needs its header
        if not self.path.exists() or self.path.stat().st_size == 0:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f, **CSV_OPTIONS).writerow(self.columns)
            self._last_id = 0
            logger.info(f"Created report store {self.path} ({self.variant} variant)")
            return

        header, _ = self._read_rows()
        if header != self.columns:
            raise StoreCorruptedError(
                f"Report store {self.path} has header {','.join(header)}, "
                f"expected {','.join(self.columns)}"
            )

    def _read_rows(self) -> Tuple[List[str], List[List[str]]]:
        """Return the header and the raw string rows, checking every row's width"""
        with open(self.path, newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            header = next(reader, [])
            rows = []
            for row in reader:
                if not row:
                    continue
                if len(row) != len(header):
                    raise StoreCorruptedError(
                        f"Row ending on line {reader.line_num} of {self.path} has "
                        f"{len(row)} columns, expected {len(header)}"
                    )
                rows.append(row)
        return header, rows

    def _write_rows(self, rows: List[List[str]]) -> None:
        """Replace the whole file atomically"""
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, **CSV_OPTIONS)
                writer.writerow(self.columns)
                writer.writerows(rows)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # ---------- parsing ----------

    def _parse_row(self, row: List[str]) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        for column, value in zip(self.columns, row):
            try:
                if column in INTEGER_COLUMNS:
                    record[column] = int(value)
                elif column in FLOAT_COLUMNS:
                    record[column] = float(value) if value != "" else None
                else:
                    record[column] = value
            except ValueError:
                raise StoreCorruptedError(
                    f"Invalid {column} value {value!r} in report store {self.path}"
                )
        return record

    def _last_assigned_id(self, rows: List[List[str]]) -> int:
        if self._last_id is None:
            self._last_id = max((self._parse_row(row)["id"] for row in rows), default=0)
        return self._last_id

    # ---------- operations ----------

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Assign the next id to ``record``, store it and return it as it reads back"""
        with self._lock:
            self._ensure_file()
            if self._last_id is None:
                _, rows = self._read_rows()
                self._last_assigned_id(rows)

            report_id = self._last_id + 1
            row = [str(report_id)] + [_format_value(record.get(column)) for column in self.columns[1:]]

            with open(self.path, "a", newline="", encoding="utf-8") as f:
                csv.writer(f, **CSV_OPTIONS).writerow(row)
            self._last_id = report_id

        logger.info(f"Stored report {report_id} in {self.path}")
        return self._parse_row(row)

    def read_all(self) -> List[Dict[str, Any]]:
        """Every report in submission order"""
        with self._lock:
            self._ensure_file()
            _, rows = self._read_rows()
        return [self._parse_row(row) for row in rows]

    def get(self, report_id: int) -> Dict[str, Any]:
        for report in self.read_all():
            if report["id"] == report_id:
                return report
        raise NotFoundError(f"Report {report_id} not found.")

    def update_status(self, report_id: int, status: str) -> Dict[str, Any]:
        """Overwrite the status column of one report, leaving every other field untouched"""
        if not self.supports_status:
            raise ValidationError("Report status updates are not available in this deployment.")

        status_index = self.columns.index("status")
        target = str(report_id)

        with self._lock:
            self._ensure_file()
            _, rows = self._read_rows()

            updated = None
            for row in rows:
                if row[0] == target:
                    row[status_index] = status
                    updated = row
                    break

            if updated is None:
                raise NotFoundError(f"Report {report_id} not found.")

            self._write_rows(rows)

        logger.info(f"Report {report_id} status updated to {status}")
        return self._parse_row(updated)
