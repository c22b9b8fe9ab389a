"""
Overview risk remembered across Streamlit reruns

Streamlit re-executes the page script on every interaction, so the overview
assessment is kept in session state and only refetched when the location
changes.
"""

from api_connectors import WeatherFetchError

STATE_KEY = "overview_risk"


def cached_overview(state, service, location):
    """
    Overview assessment for a location, fetched at most once per location

    A failed fetch is remembered as None, so an unavailable weather service
    is not retried on every rerun.

    Args:
        state: st.session_state or any mutable mapping
        service: RiskAssessmentService
        location: Coordinates to assess

    Returns:
        RiskAssessment, or None if the weather could not be fetched
    """
    cached = state.get(STATE_KEY)
    if cached is None or cached["location"] != location:
        try:
            assessment = service.overview(location.latitude, location.longitude)
        except WeatherFetchError:
            assessment = None
        cached = {"location": location, "assessment": assessment}
        state[STATE_KEY] = cached
    return cached["assessment"]
