"""
FastAPI REST API for Community Fire Watch

Provides RESTful endpoints for fire risk, fire reports, notifications and
authentication.
"""

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Callable, List, Optional, Dict
from datetime import datetime
import logging
import sys
import os

# Add src directory to path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from api_connectors import OpenWeatherConnector, SupabaseAuthConnector, WeatherFetchError
from incident_reporting import (
    AuthSession,
    FireReport,
    FireReportService,
    FireSeverity,
    InMemoryNotificationRepository,
    Notification,
    NotificationFilter,
    NotificationNotFound,
    NotificationRepository,
    ReportValidationError,
    SignupResult,
    SignupValidationError,
    User,
)
from risk_scoring import (
    InvalidObservation,
    RiskAssessmentService,
    RiskFactors,
    RiskVariant,
    UnitSystem,
    WeatherObservation,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# Pydantic models
class LocationInput(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude (-90 to 90)")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude (-180 to 180)")
    units: UnitSystem = Field(UnitSystem.IMPERIAL, description="metric (°C, m/s) or imperial (°F, mph)")
    variant: RiskVariant = Field(RiskVariant.DETAILED, description="overview (3 factors) or detailed (4 factors)")


class RiskResponse(BaseModel):
    location: Dict[str, float]
    units: UnitSystem
    weather: WeatherObservation
    factors: RiskFactors
    overall_risk: int
    risk_level: str
    timestamp: datetime


class NotificationsResponse(BaseModel):
    count: int
    unread_count: int
    notifications: List[Notification]


class LoginInput(BaseModel):
    email: str
    password: str


class SignupInput(BaseModel):
    email: str
    password: str
    confirm_password: Optional[str] = None
    name: str


class SessionResponse(BaseModel):
    authenticated: bool
    user: Optional[User] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class SignupResponse(BaseModel):
    result: SignupResult
    session: Optional[SessionResponse] = None


# Dependencies

def get_assessment_service(request: Request) -> RiskAssessmentService:
    return request.app.state.assessment_service


def get_weather_connector(request: Request):
    return request.app.state.weather_connector


def get_report_service(request: Request) -> FireReportService:
    return request.app.state.report_service


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def get_auth_session(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> AuthSession:
    """A session for this request, restored from its bearer token"""
    session = AuthSession(request.app.state.auth_connector)
    token = _bearer_token(authorization)
    if token:
        session.restore(token)
    else:
        session.loading = False
    return session


def require_user(session: AuthSession = Depends(get_auth_session)) -> User:
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Sign in to continue")
    return session.user


def get_notification_repository(
    request: Request,
    user: User = Depends(require_user)
) -> NotificationRepository:
    """The signed-in user's notifications, created on first use"""
    repositories: Dict[str, NotificationRepository] = request.app.state.notification_repositories
    if user.id not in repositories:
        repositories[user.id] = request.app.state.notification_repository_factory(user.id)
    return repositories[user.id]


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        authenticated=session.is_authenticated,
        user=session.user,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )


def _risk_response(assessment, latitude: float, longitude: float) -> RiskResponse:
    observation = assessment.observation
    return RiskResponse(
        location={"latitude": latitude, "longitude": longitude},
        units=observation.unit_system,
        weather=observation,
        factors=assessment.factors,
        overall_risk=assessment.factors.overall_risk,
        risk_level=assessment.factors.level.value,
        timestamp=assessment.assessed_at,
    )


def create_app(
    weather_connector=None,
    auth_connector=None,
    notification_repository_factory: Optional[Callable[[str], NotificationRepository]] = None,
    report_service: Optional[FireReportService] = None
) -> FastAPI:
    """
    Build the API with its collaborators

    Any collaborator left as None gets the default implementation, configured
    from the environment. notification_repository_factory is called with a
    user id the first time that user's notifications are needed.
    """
    app = FastAPI(
        title="Community Fire Watch API",
        description="Fire risk from live weather, community fire reports and notifications",
        version=API_VERSION
    )

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    weather_connector = weather_connector or OpenWeatherConnector()
    app.state.weather_connector = weather_connector
    app.state.assessment_service = RiskAssessmentService(weather_connector)
    app.state.auth_connector = auth_connector or SupabaseAuthConnector()
    app.state.notification_repository_factory = (
        notification_repository_factory or (lambda user_id: InMemoryNotificationRepository())
    )
    app.state.notification_repositories = {}
    app.state.report_service = report_service or FireReportService()

    # API Endpoints

    @app.get("/")
    async def root():
        """API root endpoint"""
        return {
            "message": "Community Fire Watch API",
            "version": API_VERSION,
            "endpoints": {
                "health": "/health",
                "risk_assessment": "/api/v1/risk/location",
                "risk_overview": "/api/v1/risk/overview",
                "weather": "/api/v1/weather",
                "reports": "/api/v1/reports",
                "notifications": "/api/v1/notifications",
                "auth": "/api/v1/auth/session"
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "services": {
                "weather_api": "configured" if getattr(weather_connector, "api_key", True) else "missing api key",
                "auth_provider": "configured" if getattr(app.state.auth_connector, "url", True) else "missing url",
            }
        }

    @app.post("/api/v1/risk/location", response_model=RiskResponse)
    def assess_location_risk(
        location: LocationInput,
        service: RiskAssessmentService = Depends(get_assessment_service)
    ):
        """
        Assess fire risk for a specific location

        Returns the current weather, per-factor risk scores and the risk level.
        """
        try:
            assessment = service.assess(
                location.latitude,
                location.longitude,
                location.units,
                location.variant
            )
        except WeatherFetchError as e:
            raise HTTPException(status_code=503, detail=f"Risk unavailable: {e}")
        except InvalidObservation as e:
            raise HTTPException(status_code=422, detail=str(e))

        return _risk_response(assessment, location.latitude, location.longitude)

    @app.get("/api/v1/risk/overview", response_model=RiskResponse)
    def get_risk_overview(
        latitude: float = Query(..., ge=-90, le=90),
        longitude: float = Query(..., ge=-180, le=180),
        service: RiskAssessmentService = Depends(get_assessment_service)
    ):
        """Three-factor risk in metric units, as shown on the overview page"""
        try:
            assessment = service.overview(latitude, longitude)
        except WeatherFetchError as e:
            raise HTTPException(status_code=503, detail=f"Risk unavailable: {e}")
        except InvalidObservation as e:
            raise HTTPException(status_code=422, detail=str(e))

        return _risk_response(assessment, latitude, longitude)

    @app.get("/api/v1/weather", response_model=WeatherObservation)
    def get_weather(
        latitude: float = Query(..., ge=-90, le=90),
        longitude: float = Query(..., ge=-180, le=180),
        units: UnitSystem = Query(UnitSystem.METRIC),
        connector=Depends(get_weather_connector)
    ):
        """Get current weather for a location"""
        try:
            return connector.fetch_weather(latitude, longitude, units)
        except WeatherFetchError as e:
            raise HTTPException(status_code=503, detail=f"Weather unavailable: {e}")

    @app.post("/api/v1/reports", response_model=FireReport, status_code=201)
    async def submit_report(
        image: UploadFile = File(...),
        latitude: float = Form(...),
        longitude: float = Form(...),
        severity: FireSeverity = Form(FireSeverity.MODERATE),
        description: str = Form(""),
        user: User = Depends(require_user),
        service: FireReportService = Depends(get_report_service)
    ):
        """Report a fire with a photo and its location"""
        content = await image.read()
        try:
            return service.submit(
                image=content,
                image_filename=image.filename,
                image_content_type=image.content_type,
                latitude=latitude,
                longitude=longitude,
                severity=severity,
                description=description,
                reporter_id=user.id
            )
        except ReportValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.get("/api/v1/reports")
    def list_reports(
        user: User = Depends(require_user),
        service: FireReportService = Depends(get_report_service)
    ):
        """Fire reports the signed-in user submitted since the service started"""
        reports = service.recent_reports(reporter_id=user.id)
        return {
            "count": len(reports),
            "reports": reports
        }

    @app.get("/api/v1/notifications", response_model=NotificationsResponse)
    def list_notifications(
        filter: NotificationFilter = Query(NotificationFilter.ALL),
        repository: NotificationRepository = Depends(get_notification_repository)
    ):
        """List notifications, newest first"""
        notifications = repository.list_notifications(filter)
        return NotificationsResponse(
            count=len(notifications),
            unread_count=repository.unread_count(),
            notifications=notifications
        )

    @app.post("/api/v1/notifications/read-all")
    def mark_all_notifications_read(
        repository: NotificationRepository = Depends(get_notification_repository)
    ):
        """Mark every notification as read"""
        return {"marked_read": repository.mark_all_read()}

    @app.post("/api/v1/notifications/{notification_id}/read", response_model=Notification)
    def mark_notification_read(
        notification_id: str,
        repository: NotificationRepository = Depends(get_notification_repository)
    ):
        """Mark one notification as read"""
        try:
            return repository.mark_read(notification_id)
        except NotificationNotFound:
            raise HTTPException(status_code=404, detail=f"Notification {notification_id} not found")

    @app.post("/api/v1/auth/login", response_model=SessionResponse)
    def login(credentials: LoginInput, request: Request):
        """Sign in with email and password"""
        session = AuthSession(request.app.state.auth_connector)
        if not session.login(credentials.email, credentials.password):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        return _session_response(session)

    @app.post("/api/v1/auth/signup", response_model=SignupResponse)
    def signup(form: SignupInput, request: Request):
        """Create an account"""
        session = AuthSession(request.app.state.auth_connector)
        try:
            result = session.signup(form.email, form.password, form.name, form.confirm_password)
        except SignupValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if result is SignupResult.FAILED:
            raise HTTPException(status_code=400, detail="Signup failed. Please try again.")

        return SignupResponse(
            result=result,
            session=_session_response(session) if session.is_authenticated else None
        )

    @app.post("/api/v1/auth/logout")
    def logout(session: AuthSession = Depends(get_auth_session)):
        """Sign out of the current session"""
        session.logout()
        return {"authenticated": False}

    @app.get("/api/v1/auth/session", response_model=SessionResponse)
    def get_session(session: AuthSession = Depends(get_auth_session)):
        """Current user for the bearer token, if any"""
        return _session_response(session)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
