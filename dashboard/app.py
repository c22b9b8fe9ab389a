"""
Streamlit Dashboard for Community Fire Watch

Sign in, check fire risk for a location, report fires and read notifications.
"""

import streamlit as st
import plotly.express as px
from datetime import datetime, timezone
import sys
import os

# Add src directory to path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from api_connectors import (
    CachedLocation,
    IPGeolocationConnector,
    LocationError,
    OpenWeatherConnector,
    SupabaseAuthConnector,
    WeatherFetchError,
)
from incident_reporting import (
    AuthSession,
    FireReportService,
    FireSeverity,
    InMemoryNotificationRepository,
    NotificationFilter,
    NotificationType,
    ReportValidationError,
    SignupResult,
    SignupValidationError,
    format_relative_time,
)
from risk_scoring import FireRiskScorer, RiskAssessmentService, RiskLevel, RiskVariant, UnitSystem

from risk_cache import cached_overview

# Page configuration
st.set_page_config(
    page_title="Community Fire Watch",
    page_icon="🔥",
    layout="wide",
    initial_sidebar_state="expanded"
)

RISK_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MODERATE: "gold",
    RiskLevel.HIGH: "orange",
    RiskLevel.EXTREME: "red",
}

EMERGENCY_NUMBERS = [
    ("🚒 Fire Brigade", "101"),
    ("🆘 Disaster Management", "108"),
    ("🚑 Ambulance", "102"),
    ("🚓 Police", "100"),
    ("📞 National Emergency", "112"),
]


# Initialize connectors
@st.cache_resource
def get_connectors():
    weather = OpenWeatherConnector()
    return {
        "weather": weather,
        "assessment": RiskAssessmentService(weather),
        "auth": SupabaseAuthConnector(),
        "locator": IPGeolocationConnector(),
    }


connectors = get_connectors()

# Per-browser-session state
if "auth_session" not in st.session_state:
    st.session_state.auth_session = AuthSession(connectors["auth"])
    st.session_state.auth_session.loading = False
if "location" not in st.session_state:
    st.session_state.location = CachedLocation(connectors["locator"])
if "notifications" not in st.session_state:
    st.session_state.notifications = InMemoryNotificationRepository()
if "reports" not in st.session_state:
    st.session_state.reports = FireReportService()

session: AuthSession = st.session_state.auth_session


def show_risk_level(level: RiskLevel, score: int):
    if level is RiskLevel.EXTREME:
        st.error(f"⚠️ **{level.value} Risk** ({score}/100) - Immediate attention required")
    elif level is RiskLevel.HIGH:
        st.warning(f"⚠️ **{level.value} Risk** ({score}/100) - Close monitoring recommended")
    elif level is RiskLevel.MODERATE:
        st.info(f"ℹ️ **{level.value} Risk** ({score}/100) - Standard precautions advised")
    else:
        st.success(f"✅ **{level.value} Risk** ({score}/100) - Minimal concern")


def current_location():
    try:
        return st.session_state.location.get()
    except LocationError as e:
        st.sidebar.warning(f"Could not determine your location: {e}")
        return None


def auth_page():
    st.title("🔥 Community Fire Watch")
    st.markdown("**Report fires and stay informed about fire risk in your area**")

    login_tab, signup_tab = st.tabs(["Sign In", "Create Account"])

    with login_tab:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Sign In", type="primary"):
                if session.login(email, password):
                    st.rerun()
                else:
                    st.error("Invalid email or password.")

    with signup_tab:
        with st.form("signup"):
            name = st.text_input("Full Name")
            email = st.text_input("Email", key="signup_email")
            password = st.text_input("Password", type="password", key="signup_password")
            confirm = st.text_input("Confirm Password", type="password")
            if st.form_submit_button("Create Account", type="primary"):
                try:
                    result = session.signup(email, password, name, confirm)
                except SignupValidationError as e:
                    st.error(str(e))
                else:
                    if result is SignupResult.SIGNED_UP:
                        st.rerun()
                    elif result is SignupResult.CONFIRMATION_REQUIRED:
                        st.success("Signup successful! Please check your email to confirm your account.")
                    else:
                        st.error("Signup failed. Please try again.")


def overview_page():
    user = session.user
    col_greeting, col_time = st.columns([3, 1])
    col_greeting.subheader(f"Welcome back, {user.name if user else 'User'} 👋")
    col_greeting.caption("Stay safe and updated.")
    col_time.markdown(datetime.now().strftime("%A, %d %B %Y  \n%H:%M:%S"))

    location = current_location()
    repository = st.session_state.notifications

    col1, col2, col3 = st.columns(3)

    with col1:
        assessment = None
        if location is not None:
            assessment = cached_overview(st.session_state, connectors["assessment"], location)
        if assessment is None:
            st.metric(label="Current Risk", value="Unavailable")
        else:
            st.metric(
                label="Current Risk",
                value=assessment.factors.level.value,
                delta=f"{assessment.factors.overall_risk}/100",
                delta_color="off"
            )

    col2.metric(label="Location", value=str(location) if location else "Unknown")
    col3.metric(label="Active Alerts", value=f"{repository.unread_count()} notifications")

    st.markdown("---")
    st.subheader("Emergency Information")
    st.caption("In case of fire or other disasters, use the numbers below to seek immediate help.")
    columns = st.columns(len(EMERGENCY_NUMBERS))
    for column, (label, number) in zip(columns, EMERGENCY_NUMBERS):
        column.markdown(f"**{label}**  \n[{number}](tel:{number})")


def report_page():
    st.subheader("📸 Report Fire Incident")
    location = current_location()

    if location:
        st.info(f"📍 Latitude: {location.latitude:.6f}, Longitude: {location.longitude:.6f}")
    else:
        st.warning("📍 Location unavailable - a location is required to submit a report.")

    with st.form("fire_report", clear_on_submit=True):
        image = st.file_uploader("Upload Photo of Fire Incident *", type=["png", "jpg", "jpeg", "webp"])
        severity = st.selectbox(
            "Fire Severity Level *",
            options=list(FireSeverity),
            index=list(FireSeverity).index(FireSeverity.MODERATE),
            format_func=lambda s: f"{s.value.capitalize()} - {s.description}"
        )
        description = st.text_area(
            "Additional Details",
            placeholder="Describe what you observed, estimated size, direction of spread, potential causes, etc."
        )
        st.caption(
            "If this is an emergency requiring immediate assistance, please call emergency services immediately. "
            "This report is for documentation and community notification purposes."
        )
        submitted = st.form_submit_button("Submit Fire Report", type="primary")

    if submitted:
        try:
            st.session_state.reports.submit(
                image=image.getvalue() if image else None,
                image_filename=image.name if image else "",
                image_content_type=image.type if image else "",
                latitude=location.latitude if location else None,
                longitude=location.longitude if location else None,
                severity=severity,
                description=description,
                reporter_id=session.user.id if session.user else None
            )
            st.success(
                "Report submitted! Thank you for reporting this fire incident. "
                "Emergency services and nearby users have been notified."
            )
        except ReportValidationError as e:
            st.error(str(e))

    reports = st.session_state.reports.reports_frame(reporter_id=session.user.id if session.user else None)
    if not reports.empty:
        st.subheader("Your Reports")
        st.dataframe(
            reports[["submitted_at", "severity", "latitude", "longitude", "description"]],
            use_container_width=True
        )


def risk_page():
    st.subheader("🗺️ Assess Fire Risk for a Location")

    location = st.session_state.location.coordinates
    col1, col2, col3 = st.columns(3)
    latitude = col1.number_input(
        "Latitude", value=location.latitude if location else 34.0522,
        min_value=-90.0, max_value=90.0, format="%.4f"
    )
    longitude = col2.number_input(
        "Longitude", value=location.longitude if location else -118.2437,
        min_value=-180.0, max_value=180.0, format="%.4f"
    )
    units = col3.radio(
        "Units", options=list(UnitSystem), index=1,
        format_func=lambda u: u.value.capitalize(), horizontal=True
    )

    if st.button("Analyze Risk", type="primary"):
        with st.spinner("Loading weather data..."):
            try:
                st.session_state.assessment = connectors["assessment"].assess(
                    latitude, longitude, units, RiskVariant.DETAILED
                )
            except WeatherFetchError as e:
                st.session_state.assessment = None
                st.error(f"Risk unavailable: {e}")

    assessment = st.session_state.get("assessment")
    if assessment is None:
        return

    factors = assessment.factors
    weather = assessment.observation
    unit_system = weather.unit_system

    st.subheader("📊 Fire Risk Level")
    show_risk_level(factors.level, factors.overall_risk)

    st.subheader("🌦️ Weather Details")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Temperature", f"{weather.temperature}{unit_system.temperature_unit}")
    col2.metric("Humidity", f"{weather.humidity}%")
    col3.metric("Wind", f"{weather.wind_speed} {unit_system.wind_speed_unit}")
    col4.metric("Conditions", weather.condition)

    st.subheader("🔥 Risk Breakdown")
    breakdown = FireRiskScorer.risk_breakdown(factors)
    fig = px.bar(
        breakdown,
        x="factor",
        y="score",
        color="level",
        color_discrete_map={level.value: color for level, color in RISK_COLORS.items()},
        labels={"factor": "Risk Factor", "score": "Risk Score (0-100)"},
        title="Individual Factor Risk Scores",
        range_y=[0, 100]
    )
    st.plotly_chart(fig, use_container_width=True)
    st.caption("Vegetation risk is estimated from humidity; no vegetation data source is used.")


def notifications_page():
    repository = st.session_state.notifications
    unread = repository.unread_count()

    col_title, col_action = st.columns([3, 1])
    col_title.subheader("🔔 Notifications")
    col_title.caption(f"{unread} unread notifications" if unread else "All notifications read")
    if unread and col_action.button("Mark all as read"):
        repository.mark_all_read()
        st.rerun()

    selected = st.radio(
        "Show", options=list(NotificationFilter), horizontal=True,
        format_func=lambda f: f"Unread ({unread})" if f is NotificationFilter.UNREAD else f.value.capitalize()
    )

    notifications = repository.list_notifications(selected)
    if not notifications:
        st.info("No notifications to show.")
        return

    now = datetime.now(timezone.utc)
    for notification in notifications:
        heading = f"**{notification.title}**" + ("" if notification.read else "  •")
        body = f"{heading}  \n{notification.message}  \n_{format_relative_time(notification.timestamp, now)}_"
        if notification.location:
            body += f" · 📍 {notification.location}"

        if notification.type is NotificationType.ALERT:
            st.error(body)
        elif notification.type is NotificationType.SUCCESS:
            st.success(body)
        else:
            st.info(body)

        if not notification.read and st.button("Mark as read", key=f"read_{notification.id}"):
            repository.mark_read(notification.id)
            st.rerun()


# Main content
if not session.is_authenticated:
    auth_page()
else:
    st.sidebar.header("🔥 Community Fire Watch")
    st.sidebar.markdown(f"Signed in as **{session.user.name}**")

    pages = {
        "Overview": overview_page,
        "Report Fire": report_page,
        "Risk Assessment": risk_page,
        "Notifications": notifications_page,
    }
    page = st.sidebar.radio("Navigate", list(pages))

    if st.sidebar.button("Sign Out"):
        session.logout()
        st.rerun()

    pages[page]()

# Footer
st.sidebar.markdown("---")
st.sidebar.markdown("""
**Community Fire Watch**
Version 1.0.0
Data Sources: OpenWeather
""")
