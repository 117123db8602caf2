"""
Notification entity - a user-facing event in the notification log.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict

from thalexa.domain.entities.coercion import as_bool


class NotificationType(Enum):
    """Kinds of events recorded in the notification log."""

    CONNECTED = "connected"
    REGISTERED = "registered"
    VERIFIED = "verified"
    PAYMENT_SENT = "payment-sent"
    OPERATION_FAILED = "operation-failed"
    INFO = "info"

    @classmethod
    def from_str(cls, value: str) -> NotificationType:
        try:
            return cls(value)
        except ValueError:
            return cls.INFO


@dataclass(frozen=True)
class Notification:
    """
    A single entry of the notification log.

    Attributes:
        id: Monotonic millisecond-derived id, unique within the state
        type: Event kind
        title: Short title
        message: Body text
        timestamp: Creation time in epoch milliseconds
        read: Flipped only by an explicit acknowledgement
    """

    id: int
    type: NotificationType
    title: str
    message: str
    timestamp: int
    read: bool = False

    def mark_read(self) -> Notification:
        return replace(self, read=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp,
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Notification:
        return cls(
            id=int(data["id"]),
            type=NotificationType.from_str(str(data.get("type") or "info")),
            title=str(data.get("title") or ""),
            message=str(data.get("message") or ""),
            timestamp=int(data.get("timestamp") or data["id"]),
            read=as_bool(data.get("read")),
        )
