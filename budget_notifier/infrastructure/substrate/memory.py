"""In-process notification substrate for local runs and tests"""

import uuid
from typing import Dict, List, Optional

from budget_notifier.infrastructure.substrate.base import (
    DisplayPolicy,
    NotificationChannel,
    NotificationContent,
    NotificationSubstrate,
    ScheduledNotification,
)


class InMemoryNotificationSubstrate(NotificationSubstrate):
    """Keeps pending notifications in a dict keyed by identifier"""

    def __init__(self, permission_granted: bool = True, supports_channels: bool = True):
        self.permission_granted = permission_granted
        self.supports_channels = supports_channels
        self.display_policy: Optional[DisplayPolicy] = None
        self.channels: Dict[str, NotificationChannel] = {}
        self.permission_requests = 0
        self.cancelled: List[str] = []
        self._scheduled: Dict[str, ScheduledNotification] = {}

    async def set_display_policy(self, policy: DisplayPolicy) -> None:
        self.display_policy = policy

    async def ensure_channel(self, channel: NotificationChannel) -> None:
        if self.supports_channels:
            self.channels[channel.id] = channel

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.permission_granted

    async def schedule_at(self, content: NotificationContent, delay_seconds: int, repeats: bool = False) -> str:
        if delay_seconds < 0:
            raise ValueError(f"Delay must not be negative, got {delay_seconds}")
        identifier = str(uuid.uuid4())
        self._scheduled[identifier] = ScheduledNotification(
            identifier=identifier,
            content=content,
            delay_seconds=delay_seconds,
            repeats=repeats,
        )
        return identifier

    async def list_scheduled(self) -> List[ScheduledNotification]:
        return list(self._scheduled.values())

    async def cancel(self, identifier: str) -> None:
        self._scheduled.pop(identifier, None)
        self.cancelled.append(identifier)
