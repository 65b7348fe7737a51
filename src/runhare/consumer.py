"""Consumer-side dispatch: verify inbound events and route them to handlers."""

import inspect
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Union

from loguru import logger

from .config import Config
from .models import ConsumerOptions, ConsumerResponse, FailureReason
from .signing import EVENT_HEADER, get_header, verify_payload

# Events from third parties that cannot know the shared secret
WEBHOOK_PREFIX = "webhook-"

HandlerResult = Optional[ConsumerResponse]
EventHandler = Callable[
    [str, Any, Mapping[str, Any]],
    Union[HandlerResult, Awaitable[HandlerResult]],
]
Dispatcher = Callable[..., Awaitable[ConsumerResponse]]


def requires_verification(event: str) -> bool:
    """Webhook events skip signature verification, all others require it."""
    return not event.startswith(WEBHOOK_PREFIX)


def _coerce_result(result: Any) -> ConsumerResponse:
    """
    Map a completed handler's return value onto a ConsumerResponse.

    A ConsumerResponse passes through unchanged. A mapping reports a
    failure only through a non-empty "error" entry, so {"result": "sucess"}
    style returns stay successes. Any other value, None included, means the
    handler completed and counts as success.
    """
    if isinstance(result, ConsumerResponse):
        return result
    if isinstance(result, Mapping) and result.get("error"):
        return ConsumerResponse.fail(result["error"])
    return ConsumerResponse.success()


class Consumer:
    """
    Verifying event consumer bound to one shared secret.

    Handlers created here never raise: every inbound event resolves to a
    ConsumerResponse, including handler exceptions.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        options: Optional[ConsumerOptions] = None,
    ):
        """
        Initialize consumer.

        Args:
            secret: Shared signing secret; None verifies against an empty key
            options: Routing policy (defaults from Config)
        """
        self.secret = secret or ""
        self.options = options or ConsumerOptions(
            reject_unregistered_messages=Config.REJECT_UNREGISTERED_MESSAGES
        )

    def create_handler(
        self,
        events: Iterable[str],
        handler: EventHandler,
    ) -> Dispatcher:
        """
        Build a dispatcher for a set of registered events.

        Per call: resolve the event header, apply the registration policy,
        verify the signature (unless it is a webhook event), then invoke
        handler(event, payload, headers).

        Args:
            events: Event names this handler accepts
            handler: Sync or async callable; see _coerce_result() for how
                its return value maps onto a ConsumerResponse

        Returns:
            async dispatch(payload, headers, raw_body=None) -> ConsumerResponse
        """
        registered = frozenset(events)
        secret = self.secret
        reject_unregistered = self.options.reject_unregistered_messages

        async def dispatch(
            payload: Any,
            headers: Optional[Mapping[str, Any]],
            raw_body: Optional[Union[str, bytes]] = None,
        ) -> ConsumerResponse:
            event = get_header(headers, EVENT_HEADER)

            if not isinstance(event, str) or event not in registered:
                if reject_unregistered:
                    logger.warning(f"Rejected unregistered event: {event!r}")
                    return ConsumerResponse.fail(FailureReason.EVENT_NOT_REGISTERED)
                # Shared namespaces deliver events meant for other handlers
                logger.debug(f"Ignoring unregistered event: {event!r}")
                return ConsumerResponse.success()

            try:
                if requires_verification(event):
                    verification = verify_payload(secret, payload, headers, raw_body)
                    if not verification.ok:
                        return ConsumerResponse.fail(verification.reason)

                result = handler(event, payload, headers or {})
                if inspect.isawaitable(result):
                    result = await result
                return _coerce_result(result)
            except Exception as e:
                logger.error(f"Handler for event {event!r} failed: {e}")
                return ConsumerResponse.fail(str(e) or type(e).__name__)

        return dispatch

    def create_router(self, handlers: Mapping[str, EventHandler]) -> Dispatcher:
        """
        Build a dispatcher from an event -> handler table.

        The registered event set is the table's keys; each event is routed
        to its own handler after the same policy and verification steps as
        create_handler().
        """
        table = dict(handlers)

        def route(event: str, payload: Any, headers: Mapping[str, Any]):
            return table[event](event, payload, headers)

        return self.create_handler(table.keys(), route)


def create_consumer(
    secret: Optional[str] = None,
    options: Optional[ConsumerOptions] = None,
    reject_unregistered_messages: Optional[bool] = None,
) -> Consumer:
    """
    Create a Consumer.

    reject_unregistered_messages, when given, overrides options.
    """
    if reject_unregistered_messages is not None:
        options = ConsumerOptions(reject_unregistered_messages=reject_unregistered_messages)
    return Consumer(secret=secret, options=options)
