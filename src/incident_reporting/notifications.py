"""
Notifications

Notification storage sits behind NotificationRepository so a real backend
can replace the in-memory list without touching the API or dashboard.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional
import logging

import pandas as pd
from pydantic import BaseModel

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    ALERT = "alert"
    INFO = "info"
    SUCCESS = "success"


class NotificationFilter(str, Enum):
    ALL = "all"
    UNREAD = "unread"
    ALERTS = "alerts"


class Notification(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    location: Optional[str] = None
    timestamp: datetime
    read: bool = False

    def matches(self, notification_filter: NotificationFilter) -> bool:
        if notification_filter is NotificationFilter.UNREAD:
            return not self.read
        if notification_filter is NotificationFilter.ALERTS:
            return self.type is NotificationType.ALERT
        return True


class NotificationNotFound(KeyError):
    """No notification with the given id"""


class NotificationRepository(ABC):
    """Storage for a user's notifications"""

    @abstractmethod
    def list_notifications(self, notification_filter: NotificationFilter = NotificationFilter.ALL) -> List[Notification]:
        """Notifications matching the filter, newest first"""

    @abstractmethod
    def mark_read(self, notification_id: str) -> Notification:
        """
        Mark one notification as read

        Raises:
            NotificationNotFound: unknown id
        """

    @abstractmethod
    def mark_all_read(self) -> int:
        """Mark every notification as read, returning how many changed"""

    def unread_count(self) -> int:
        return len(self.list_notifications(NotificationFilter.UNREAD))

    def notifications_frame(self, notification_filter: NotificationFilter = NotificationFilter.ALL) -> pd.DataFrame:
        """Matching notifications as a DataFrame, newest first"""
        notifications = self.list_notifications(notification_filter)
        if not notifications:
            return pd.DataFrame()
        return pd.DataFrame([n.model_dump() for n in notifications])


def sample_notifications(now: Optional[datetime] = None) -> List[Notification]:
    """Example notifications relative to `now`"""
    now = now or datetime.now(timezone.utc)
    return [
        Notification(
            id="1",
            type=NotificationType.ALERT,
            title="High Fire Risk Alert",
            message="Fire risk has increased to HIGH in your area due to hot, dry conditions and strong winds.",
            location="Within 5 miles of your location",
            timestamp=now - timedelta(minutes=30),
            read=False,
        ),
        Notification(
            id="2",
            type=NotificationType.INFO,
            title="Fire Incident Reported",
            message="A small brush fire has been reported 2.3 miles northeast of your location. "
                    "Emergency services are responding.",
            location="2.3 miles NE",
            timestamp=now - timedelta(hours=2),
            read=False,
        ),
        Notification(
            id="3",
            type=NotificationType.SUCCESS,
            title="Fire Contained",
            message="The brush fire near Highway 101 has been successfully contained by emergency services.",
            location="3.1 miles SW",
            timestamp=now - timedelta(hours=4),
            read=True,
        ),
        Notification(
            id="4",
            type=NotificationType.INFO,
            title="Weather Update",
            message="Red flag warning issued for your area. Extreme fire weather conditions expected through tomorrow.",
            timestamp=now - timedelta(hours=8),
            read=True,
        ),
        Notification(
            id="5",
            type=NotificationType.ALERT,
            title="Evacuation Advisory",
            message="Precautionary evacuation advisory issued for residents in Canyon Heights area.",
            location="7.2 miles N",
            timestamp=now - timedelta(hours=12),
            read=True,
        ),
    ]


class InMemoryNotificationRepository(NotificationRepository):
    """Notifications held in memory; seeded with sample data by default"""

    def __init__(self, notifications: Optional[List[Notification]] = None, now: Optional[datetime] = None):
        if notifications is None:
            notifications = sample_notifications(now)
        self._notifications: Dict[str, Notification] = {n.id: n for n in notifications}

    def list_notifications(self, notification_filter: NotificationFilter = NotificationFilter.ALL) -> List[Notification]:
        notification_filter = NotificationFilter(notification_filter)
        matching = [n for n in self._notifications.values() if n.matches(notification_filter)]
        return sorted(matching, key=lambda n: n.timestamp, reverse=True)

    def mark_read(self, notification_id: str) -> Notification:
        if notification_id not in self._notifications:
            raise NotificationNotFound(notification_id)
        notification = self._notifications[notification_id].model_copy(update={"read": True})
        self._notifications[notification_id] = notification
        return notification

    def mark_all_read(self) -> int:
        changed = 0
        for notification_id, notification in self._notifications.items():
            if not notification.read:
                self._notifications[notification_id] = notification.model_copy(update={"read": True})
                changed += 1
        logger.info(f"Marked {changed} notifications as read")
        return changed

    def add(self, notification: Notification):
        self._notifications[notification.id] = notification


def format_relative_time(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """
    Human-readable age of a timestamp

    Under an hour: "N minutes ago"; under a day: "N hours ago"; otherwise
    the date.
    """
    now = now or datetime.now(timezone.utc)
    # Naive datetimes are UTC
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    minutes = int((now - timestamp).total_seconds() // 60)
    hours = minutes // 60

    if minutes < 60:
        return f"{minutes} minutes ago"
    elif hours < 24:
        return f"{hours} hours ago"
    else:
        return timestamp.strftime("%Y-%m-%d")
