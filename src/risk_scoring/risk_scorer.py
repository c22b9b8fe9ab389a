"""
Fire Risk Scoring Module

Maps a weather observation (temperature, humidity, wind speed) to bounded
per-factor fire risk scores, an overall score and a risk level.

Every factor is clamped to [0, 100] before rounding, so out-of-range weather
readings are absorbed rather than rejected. Only non-finite readings are
rejected, with InvalidObservation.

The vegetation factor is a placeholder: it is a second scaling of humidity,
not derived from any fuel or vegetation data.
"""

import math
import numpy as np
import pandas as pd
from typing import Dict, List, Optional
import logging

from .exceptions import InvalidObservation
from .models import RiskFactors, RiskLevel, RiskVariant, UnitSystem, WeatherObservation

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Lower bound of each band; a score equal to a cutoff belongs to the upper band
RISK_LEVEL_CUTOFFS = (
    (75, RiskLevel.EXTREME),
    (50, RiskLevel.HIGH),
    (25, RiskLevel.MODERATE),
)

TEMPERATURE_MULTIPLIER = 2.0
HUMIDITY_MULTIPLIER = 1.5
WIND_MULTIPLIER = 5.0
VEGETATION_MULTIPLIER = 1.2


def _clamp(value: float) -> float:
    return float(np.clip(value, 0.0, 100.0))


def _round_half_up(value: float) -> int:
    # 92.5 -> 93, not banker's rounding
    return int(math.floor(value + 0.5))


def _require_finite(field: str, value) -> float:
    if isinstance(value, bool) or value is None:
        raise InvalidObservation(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidObservation(field, value)
    if not math.isfinite(number):
        raise InvalidObservation(field, value)
    return number


def temperature_risk(temperature: float, unit_system: UnitSystem = UnitSystem.METRIC) -> float:
    """
    Temperature factor (0-100, unrounded)

    Starts at the unit system's reference temperature (20°C or 60°F) and
    rises 2 points per degree above it.
    """
    offset = UnitSystem(unit_system).temperature_offset
    return _clamp((temperature - offset) * TEMPERATURE_MULTIPLIER)


def humidity_risk(humidity: float) -> float:
    """Humidity factor (0-100, unrounded); drier air scores higher"""
    return _clamp((100.0 - humidity) * HUMIDITY_MULTIPLIER)


def wind_risk(wind_speed: float) -> float:
    """Wind factor (0-100, unrounded); saturates at a wind speed of 20"""
    return _clamp(wind_speed * WIND_MULTIPLIER)


def vegetation_risk(humidity: float) -> float:
    """Vegetation placeholder factor (0-100, unrounded), scaled from humidity"""
    return _clamp((100.0 - humidity) * VEGETATION_MULTIPLIER)


def classify(overall_risk: float) -> RiskLevel:
    """
    Classify a risk score into a band

    [0, 25) Low, [25, 50) Moderate, [50, 75) High, [75, 100] Extreme.
    Scores outside [0, 100] fall into the nearest end band.
    """
    score = _require_finite("overall_risk", overall_risk)

    for cutoff, level in RISK_LEVEL_CUTOFFS:
        if score >= cutoff:
            return level
    return RiskLevel.LOW


def compute_risk(
    observation: WeatherObservation,
    unit_system: Optional[UnitSystem] = None,
    variant: RiskVariant = RiskVariant.DETAILED
) -> RiskFactors:
    """
    Compute fire risk factors for a weather observation

    Args:
        observation: Weather snapshot to score
        unit_system: Unit system the observation's temperature is in. Defaults
            to the observation's own; passing a different one is an error
            rather than a silent reinterpretation.
        variant: OVERVIEW for the three-factor score, DETAILED to include
            the vegetation factor

    Returns:
        RiskFactors with every value rounded to an integer in [0, 100]

    Raises:
        InvalidObservation: a numeric field is not finite, or the unit
            system does not match the observation
    """
    if unit_system is None:
        unit_system = observation.unit_system
    unit_system = UnitSystem(unit_system)
    variant = RiskVariant(variant)

    if unit_system is not observation.unit_system:
        raise InvalidObservation(
            "unit_system",
            unit_system.value,
            f"Observation is in {observation.unit_system.value} units, "
            f"cannot score it as {unit_system.value}"
        )

    temperature = _require_finite("temperature", observation.temperature)
    humidity = _require_finite("humidity", observation.humidity)
    wind_speed = _require_finite("wind_speed", observation.wind_speed)

    factors = {
        "temperature": temperature_risk(temperature, unit_system),
        "humidity": humidity_risk(humidity),
        "wind": wind_risk(wind_speed),
    }
    if variant is RiskVariant.DETAILED:
        factors["vegetation"] = vegetation_risk(humidity)

    # Mean of clamped, unrounded factors
    overall = _round_half_up(float(np.mean(list(factors.values()))))

    return RiskFactors(
        temperature_risk=_round_half_up(factors["temperature"]),
        humidity_risk=_round_half_up(factors["humidity"]),
        wind_risk=_round_half_up(factors["wind"]),
        vegetation_risk=(
            _round_half_up(factors["vegetation"]) if "vegetation" in factors else None
        ),
        overall_risk=overall,
        level=classify(overall),
        variant=variant,
    )


class FireRiskScorer:
    """Score weather observations with a fixed factor set"""

    def __init__(self, variant: RiskVariant = RiskVariant.DETAILED):
        self.variant = RiskVariant(variant)

    def score(self, observation: WeatherObservation) -> RiskFactors:
        return compute_risk(observation, observation.unit_system, self.variant)

    def score_many(self, observations: List[WeatherObservation]) -> pd.DataFrame:
        """
        Score several observations at once

        Returns:
            DataFrame with one row per observation: the weather readings,
            every factor score, the overall score and the level
        """
        records = []
        for observation in observations:
            factors = self.score(observation)
            records.append({
                "latitude": observation.latitude,
                "longitude": observation.longitude,
                "temperature": observation.temperature,
                "humidity": observation.humidity,
                "wind_speed": observation.wind_speed,
                "condition": observation.condition,
                **{f"{k}_risk": v for k, v in factors.factor_scores().items()},
                "overall_risk": factors.overall_risk,
                "risk_level": factors.level.value,
            })
        return pd.DataFrame(records)

    @staticmethod
    def risk_breakdown(factors: RiskFactors) -> pd.DataFrame:
        """
        Per-factor breakdown for charts and tables

        Returns:
            DataFrame with columns factor, score and level
        """
        scores: Dict[str, int] = factors.factor_scores()
        return pd.DataFrame({
            "factor": [name.capitalize() for name in scores],
            "score": list(scores.values()),
            "level": [classify(score).value for score in scores.values()],
        })


if __name__ == "__main__":
    # Test the risk scorer
    print("\n" + "="*60)
    print("FIRE RISK SCORING TEST")
    print("="*60 + "\n")

    hot_dry_windy = WeatherObservation(
        temperature=95, humidity=10, wind_speed=20,
        condition="Clear", unit_system=UnitSystem.IMPERIAL
    )
    mild = WeatherObservation(
        temperature=20, humidity=100, wind_speed=0,
        condition="Rain", unit_system=UnitSystem.METRIC
    )

    detailed = compute_risk(hot_dry_windy, UnitSystem.IMPERIAL, RiskVariant.DETAILED)
    overview = compute_risk(mild, UnitSystem.METRIC, RiskVariant.OVERVIEW)

    print("Hot, dry and windy (95°F, 10%, 20 mph), detailed:")
    print(FireRiskScorer.risk_breakdown(detailed).to_string(index=False))
    print(f"  Overall: {detailed.overall_risk}/100 ({detailed.level.value})")

    print("\nMild and wet (20°C, 100%, 0 m/s), overview:")
    print(FireRiskScorer.risk_breakdown(overview).to_string(index=False))
    print(f"  Overall: {overview.overall_risk}/100 ({overview.level.value})")

    print("\n" + "="*60)
    print("TEST COMPLETE")
    print("="*60)
