"""
Test suite for the dashboard's remembered overview risk
"""

from api_connectors import Coordinates
from dashboard.risk_cache import STATE_KEY, cached_overview
from risk_scoring import RiskAssessmentService, RiskLevel

from conftest import FakeWeatherConnector


class TestCachedOverview:

    def test_fetched_once_across_reruns(self, metric_observation):
        weather = FakeWeatherConnector(observation=metric_observation)
        service = RiskAssessmentService(weather)
        state = {}
        here = Coordinates(10.0, 20.0)

        first = cached_overview(state, service, here)
        second = cached_overview(state, service, here)

        assert len(weather.calls) == 1
        assert second is first
        assert first.factors.level is RiskLevel.LOW

    def test_refetched_when_location_changes(self, metric_observation):
        weather = FakeWeatherConnector(observation=metric_observation)
        service = RiskAssessmentService(weather)
        state = {}

        cached_overview(state, service, Coordinates(10.0, 20.0))
        cached_overview(state, service, Coordinates(11.0, 21.0))

        assert [call[:2] for call in weather.calls] == [(10.0, 20.0), (11.0, 21.0)]
        assert state[STATE_KEY]["location"] == Coordinates(11.0, 21.0)

    def test_failure_remembered(self, failing_weather):
        service = RiskAssessmentService(failing_weather)
        state = {}
        here = Coordinates(10.0, 20.0)

        assert cached_overview(state, service, here) is None
        assert cached_overview(state, service, here) is None
        assert len(failing_weather.calls) == 1
