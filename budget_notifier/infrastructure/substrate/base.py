"""Interface of the platform notification substrate"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from budget_notifier.domain.models import NotificationPriority


class SubstratePriority(str, Enum):
    DEFAULT = "default"
    HIGH = "high"
    MAX = "max"


class ChannelImportance(str, Enum):
    DEFAULT = "default"
    HIGH = "high"
    MAX = "max"


@dataclass(frozen=True)
class DisplayPolicy:
    """How incoming notifications are presented while the app is open"""

    show_alert: bool = True
    play_sound: bool = True
    set_badge: bool = False


@dataclass(frozen=True)
class NotificationChannel:
    id: str
    name: str
    importance: ChannelImportance
    vibration_pattern: List[int]
    light_color: str


DEFAULT_CHANNEL = NotificationChannel(
    id="default",
    name="Default",
    importance=ChannelImportance.MAX,
    vibration_pattern=[0, 250, 250, 250],
    light_color="#FF231F7C",
)


@dataclass
class NotificationContent:
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    sound: bool = True
    priority: SubstratePriority = SubstratePriority.DEFAULT


@dataclass
class ScheduledNotification:
    """Pending trigger as reported by the substrate"""

    identifier: str
    content: NotificationContent
    delay_seconds: int
    repeats: bool = False


def to_substrate_priority(priority: Optional[NotificationPriority]) -> SubstratePriority:
    """Map a notification priority onto the substrate's levels"""
    if priority == NotificationPriority.MAX:
        return SubstratePriority.MAX
    if priority == NotificationPriority.HIGH:
        return SubstratePriority.HIGH
    return SubstratePriority.DEFAULT


class NotificationSubstrate(ABC):
    """Local notification scheduling and display service of the platform"""

    @abstractmethod
    async def set_display_policy(self, policy: DisplayPolicy) -> None:
        """Install global behavior for notifications received in-app"""

    @abstractmethod
    async def ensure_channel(self, channel: NotificationChannel) -> None:
        """Provision a notification channel; no-op where channels don't exist"""

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask the user for permission; True when granted"""

    @abstractmethod
    async def schedule_at(self, content: NotificationContent, delay_seconds: int, repeats: bool = False) -> str:
        """Schedule content to fire after delay_seconds; returns its identifier"""

    @abstractmethod
    async def list_scheduled(self) -> List[ScheduledNotification]:
        """All notifications still pending"""

    @abstractmethod
    async def cancel(self, identifier: str) -> None:
        """Cancel a pending notification"""
