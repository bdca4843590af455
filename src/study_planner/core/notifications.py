# src/study_planner/core/notifications.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum

DEFAULT_TTL_SECONDS = 4.0


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    """
    Transient, fire-and-forget message for the presentation layer.

    Views show it until `expires_at` and then drop it; nothing else
    depends on it being displayed.
    """

    message: str
    level: NotificationLevel = NotificationLevel.SUCCESS
    created_at: datetime = field(default_factory=datetime.now)
    ttl_seconds: float = DEFAULT_TTL_SECONDS

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_seconds)

    def is_active(self, at: datetime) -> bool:
        return self.created_at <= at < self.expires_at
