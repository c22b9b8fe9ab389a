"""
Risk Assessment Service

Fetches current weather for a location and scores it.
"""

from datetime import datetime, timezone
import logging

from .models import RiskAssessment, RiskVariant, UnitSystem
from .risk_scorer import compute_risk

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class RiskAssessmentService:
    """Weather fetch followed by risk scoring for one location"""

    def __init__(self, weather_connector):
        self.weather_connector = weather_connector

    def assess(
        self,
        latitude: float,
        longitude: float,
        unit_system: UnitSystem = UnitSystem.IMPERIAL,
        variant: RiskVariant = RiskVariant.DETAILED
    ) -> RiskAssessment:
        """
        Assess fire risk at a location

        A WeatherFetchError from the connector propagates to the caller;
        there is no retry and no fallback to a default observation.
        """
        observation = self.weather_connector.fetch_weather(latitude, longitude, unit_system)
        factors = compute_risk(observation, unit_system, variant)

        logger.info(
            f"Fire risk at ({latitude:.4f}, {longitude:.4f}): "
            f"{factors.overall_risk}/100 ({factors.level.value})"
        )

        return RiskAssessment(
            observation=observation,
            factors=factors,
            assessed_at=datetime.now(timezone.utc),
        )

    def overview(self, latitude: float, longitude: float) -> RiskAssessment:
        """Three-factor metric assessment shown on the overview page"""
        return self.assess(latitude, longitude, UnitSystem.METRIC, RiskVariant.OVERVIEW)
