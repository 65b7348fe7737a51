"""RunHare - signed event producer client and verifying consumer."""

__version__ = "0.1.0"

from .client import RunHareClient, create_client
from .consumer import WEBHOOK_PREFIX, Consumer, create_consumer
from .errors import MessageFailedError, RunHareError
from .models import (
    ConsumerOptions,
    ConsumerResponse,
    EventPriority,
    EventStatus,
    FailureReason,
    RunHareResponse,
)
from .signing import (
    AUTH_EXPIRY_HEADER,
    AUTH_HEADER,
    DEFAULT_TTL_MS,
    EVENT_HEADER,
    SignedEnvelope,
    VerificationResult,
    serialize_payload,
    sign_payload,
    verify_payload,
)

__all__ = [
    "AUTH_EXPIRY_HEADER",
    "AUTH_HEADER",
    "DEFAULT_TTL_MS",
    "EVENT_HEADER",
    "WEBHOOK_PREFIX",
    "Consumer",
    "ConsumerOptions",
    "ConsumerResponse",
    "EventPriority",
    "EventStatus",
    "FailureReason",
    "MessageFailedError",
    "RunHareClient",
    "RunHareError",
    "RunHareResponse",
    "SignedEnvelope",
    "VerificationResult",
    "create_client",
    "create_consumer",
    "serialize_payload",
    "sign_payload",
    "verify_payload",
    "__version__",
]
