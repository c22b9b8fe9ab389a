"""
Value models for fire-risk scoring

Weather observations come in from the weather connector and risk factors go
out to the API and dashboard. Both are immutable once created.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UnitSystem(str, Enum):
    """Unit system of a weather observation"""

    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_offset(self) -> float:
        """Temperature below which the temperature factor contributes nothing"""
        return 20.0 if self is UnitSystem.METRIC else 60.0

    @property
    def temperature_unit(self) -> str:
        return "°C" if self is UnitSystem.METRIC else "°F"

    @property
    def wind_speed_unit(self) -> str:
        return "m/s" if self is UnitSystem.METRIC else "mph"


class RiskVariant(str, Enum):
    """
    Which factors go into the overall score

    OVERVIEW averages temperature, humidity and wind.
    DETAILED also includes the vegetation factor.
    """

    OVERVIEW = "overview"
    DETAILED = "detailed"


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    EXTREME = "Extreme"

    @property
    def rank(self) -> int:
        """Position in the band order, 0 for Low up to 3 for Extreme"""
        return list(RiskLevel).index(self)


class WeatherObservation(BaseModel):
    """A single weather snapshot at a point in time and location"""

    model_config = ConfigDict(frozen=True)

    temperature: float
    humidity: float
    wind_speed: float
    condition: str = ""
    unit_system: UnitSystem = UnitSystem.METRIC
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    observed_at: Optional[datetime] = None


class RiskFactors(BaseModel):
    """Per-factor and overall fire risk, each an integer in [0, 100]"""

    model_config = ConfigDict(frozen=True)

    temperature_risk: int = Field(..., ge=0, le=100)
    humidity_risk: int = Field(..., ge=0, le=100)
    wind_risk: int = Field(..., ge=0, le=100)
    vegetation_risk: Optional[int] = Field(None, ge=0, le=100)
    overall_risk: int = Field(..., ge=0, le=100)
    level: RiskLevel
    variant: RiskVariant

    def factor_scores(self) -> dict:
        """Scores of the factors that went into the overall risk"""
        scores = {
            "temperature": self.temperature_risk,
            "humidity": self.humidity_risk,
            "wind": self.wind_risk,
        }
        if self.vegetation_risk is not None:
            scores["vegetation"] = self.vegetation_risk
        return scores


class RiskAssessment(BaseModel):
    """An observation together with the risk computed from it"""

    model_config = ConfigDict(frozen=True)

    observation: WeatherObservation
    factors: RiskFactors
    assessed_at: datetime
