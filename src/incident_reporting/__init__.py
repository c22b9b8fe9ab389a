"""
Incident Reporting Module

User sessions, fire reports and notifications.
"""

from .fire_reports import FireReport, FireReportService, FireSeverity, ReportValidationError
from .notifications import (
    InMemoryNotificationRepository,
    Notification,
    NotificationFilter,
    NotificationNotFound,
    NotificationRepository,
    NotificationType,
    format_relative_time,
)
from .session import AuthSession, SessionEvent, SignupResult, SignupValidationError, User

__all__ = [
    "AuthSession",
    "SessionEvent",
    "SignupResult",
    "SignupValidationError",
    "User",
    "FireReport",
    "FireReportService",
    "FireSeverity",
    "ReportValidationError",
    "InMemoryNotificationRepository",
    "Notification",
    "NotificationFilter",
    "NotificationNotFound",
    "NotificationRepository",
    "NotificationType",
    "format_relative_time",
]
