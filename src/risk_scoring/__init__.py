"""
Risk Scoring Module

Calculate fire risk scores from weather observations.
"""

from .assessment import RiskAssessmentService
from .exceptions import InvalidObservation
from .models import (
    RiskAssessment,
    RiskFactors,
    RiskLevel,
    RiskVariant,
    UnitSystem,
    WeatherObservation,
)
from .risk_scorer import (
    FireRiskScorer,
    classify,
    compute_risk,
    humidity_risk,
    temperature_risk,
    vegetation_risk,
    wind_risk,
)

__all__ = [
    "FireRiskScorer",
    "RiskAssessmentService",
    "InvalidObservation",
    "RiskAssessment",
    "RiskFactors",
    "RiskLevel",
    "RiskVariant",
    "UnitSystem",
    "WeatherObservation",
    "classify",
    "compute_risk",
    "humidity_risk",
    "temperature_risk",
    "vegetation_risk",
    "wind_risk",
]
