"""
Fire Incident Reports

Validates fire sightings submitted by users. The photo upload is simulated:
image bytes are checked and then discarded, and reports are kept in memory
only for the lifetime of the service.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
import logging
import uuid

import pandas as pd
from pydantic import BaseModel, Field

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024
MAX_DESCRIPTION_LENGTH = 2000


class FireSeverity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def description(self) -> str:
        return {
            FireSeverity.LOW: "Small fire, contained",
            FireSeverity.MODERATE: "Spreading fire",
            FireSeverity.HIGH: "Large fire, immediate danger",
            FireSeverity.EXTREME: "Emergency evacuation needed",
        }[self]


class FireReport(BaseModel):
    id: str
    reporter_id: Optional[str] = None
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    severity: FireSeverity = FireSeverity.MODERATE
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)
    image_filename: str
    image_content_type: str
    image_size: int
    submitted_at: datetime


class ReportValidationError(ValueError):
    """A fire report was rejected before submission"""


class FireReportService:
    """Accepts fire reports for the current session"""

    def __init__(self, max_image_bytes: int = MAX_IMAGE_BYTES):
        self.max_image_bytes = max_image_bytes
        self._reports: List[FireReport] = []

    def submit(
        self,
        image: Optional[bytes],
        image_filename: str,
        image_content_type: str,
        latitude: Optional[float],
        longitude: Optional[float],
        severity: FireSeverity = FireSeverity.MODERATE,
        description: str = "",
        reporter_id: Optional[str] = None
    ) -> FireReport:
        """
        Submit a fire report

        A photo and a location are both required.

        Raises:
            ReportValidationError: the photo, location, severity or
                description is invalid
        """
        if latitude is None or longitude is None:
            raise ReportValidationError("Location is required to report a fire")
        if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
            raise ReportValidationError(f"Invalid coordinates: {latitude}, {longitude}")

        if not image:
            raise ReportValidationError("A photo of the fire is required")
        if not (image_content_type or "").startswith("image/"):
            raise ReportValidationError(f"Unsupported file type: {image_content_type or 'unknown'}")
        if len(image) > self.max_image_bytes:
            raise ReportValidationError(
                f"Photo is too large ({len(image)} bytes, limit {self.max_image_bytes})"
            )

        try:
            severity = FireSeverity(severity)
        except ValueError:
            raise ReportValidationError(f"Unknown severity: {severity}")

        description = (description or "").strip()
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ReportValidationError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")

        report = FireReport(
            id=uuid.uuid4().hex,
            reporter_id=reporter_id,
            latitude=latitude,
            longitude=longitude,
            severity=severity,
            description=description,
            image_filename=image_filename or "upload",
            image_content_type=image_content_type,
            image_size=len(image),
            submitted_at=datetime.now(timezone.utc),
        )
        self._reports.append(report)

        logger.info(
            f"Fire report {report.id} submitted at ({latitude:.6f}, {longitude:.6f}), "
            f"severity {severity.value}, photo {report.image_size} bytes"
        )
        return report

    def recent_reports(self, reporter_id: Optional[str] = None) -> List[FireReport]:
        """Reports submitted in this session, newest first, optionally for one reporter"""
        reports = list(reversed(self._reports))
        if reporter_id is not None:
            reports = [r for r in reports if r.reporter_id == reporter_id]
        return reports

    def reports_frame(self, reporter_id: Optional[str] = None) -> pd.DataFrame:
        """Submitted reports as a DataFrame, newest first"""
        reports = self.recent_reports(reporter_id)
        if not reports:
            return pd.DataFrame()
        return pd.DataFrame([report.model_dump(mode="json") for report in reports])
