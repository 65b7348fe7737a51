"""Data models shared by the RunHare client and consumer."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypedDict


class EventPriority(str, Enum):
    """Delivery priority requested by the producer."""

    NORMAL = "normal"
    HIGH = "high"


class EventStatus(str, Enum):
    """Queue status reported by the event service."""

    QUEUED = "queued"
    PREQUED = "prequed"


class FailureReason(str, Enum):
    """Reason codes reported (as data) by verification and dispatch."""

    MISSING_SIGNATURE = "missing-signature"
    BAD_SIGNATURE = "bad-signature"
    EXPIRED_SIGNATURE = "expired-signature"
    EVENT_NOT_REGISTERED = "event-not-registered"


class RunHareResponse(TypedDict):
    """Response body returned by the event service for an accepted event."""

    status: str  # "queued" | "prequed"
    message: str  # event name
    priority: str  # "normal" | "high"


@dataclass
class ConsumerOptions:
    """
    Consumer routing policy.

    reject_unregistered_messages: when False (default) events the handler
    did not register for are acknowledged as successes without being
    verified or dispatched; when True they fail with event-not-registered.
    """

    reject_unregistered_messages: bool = False


@dataclass(frozen=True)
class ConsumerResponse:
    """Tagged dispatch result: result is "success" or "fail"."""

    result: str
    error: Optional[str] = None

    SUCCESS = "success"
    FAIL = "fail"

    @classmethod
    def success(cls) -> "ConsumerResponse":
        return cls(result=cls.SUCCESS)

    @classmethod
    def fail(cls, error: Any) -> "ConsumerResponse":
        """Build a failure; FailureReason members are stored by value."""
        if isinstance(error, FailureReason):
            error = error.value
        return cls(result=cls.FAIL, error=str(error))

    @property
    def ok(self) -> bool:
        return self.result == self.SUCCESS

    def to_dict(self) -> dict[str, str]:
        data = {"result": self.result}
        if self.error is not None:
            data["error"] = self.error
        return data
