"""Async producer client: builds, signs and posts events to a namespace."""

import inspect
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import quote

import httpx
from loguru import logger

from .config import Config
from .errors import MessageFailedError
from .models import EventPriority, RunHareResponse
from .signing import sign_payload

# Called with (envelope, signed headers) just before transmission
TraceHook = Callable[[dict[str, Any], dict[str, str]], Union[None, Awaitable[None]]]


class RunHareClient:
    """
    Client bound to a single namespace.

    Every send builds a fresh envelope, signs it and performs one POST;
    the client holds no per-send state, so concurrent sends are independent.
    """

    def __init__(
        self,
        namespace: str,
        secret: Optional[str] = None,
        origin: Optional[str] = None,
        ttl: Optional[int] = None,
        trace: Optional[TraceHook] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            namespace: Target namespace (required)
            secret: Shared signing secret; None signs with an empty key
            origin: Optional origin tag echoed in every envelope
            ttl: Signature lifetime in milliseconds (default Config.TTL_MS)
            trace: Optional observability callback, sync or async
            base_url: Service root URL (default Config.BASE_URL)
            timeout: HTTP timeout in seconds (default Config.HTTP_TIMEOUT)
            transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        if not namespace or not namespace.strip():
            raise ValueError("namespace must not be empty")

        self.namespace = namespace
        self.secret = secret or ""
        self.origin = origin or None
        self.ttl = Config.TTL_MS if ttl is None else ttl
        self.trace = trace
        self.base_url = (base_url or Config.BASE_URL).rstrip("/")
        self.timeout = Config.HTTP_TIMEOUT if timeout is None else timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{quote(self.namespace, safe='')}"

    def build_envelope(
        self,
        event: str,
        data: Any,
        priority: Union[EventPriority, str] = EventPriority.NORMAL,
        signal: Optional[bool] = None,
    ) -> dict[str, Any]:
        """
        Build the logical event envelope.

        Unset optional fields (signal, origin) are left out entirely.
        """
        envelope: dict[str, Any] = {
            "type": event,
            "data": data,
            "priority": EventPriority(priority).value,
        }
        if signal is not None:
            envelope["signal"] = signal
        if self.origin:
            envelope["origin"] = self.origin
        return envelope

    async def _run_trace(self, envelope: dict[str, Any], headers: dict[str, str]) -> None:
        if self.trace is None:
            return
        try:
            result = self.trace(envelope, dict(headers))
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Trace hook failed: {e}")
            # Continue - tracing never blocks a send

    async def send_event(
        self,
        event: str,
        data: Any,
        priority: Union[EventPriority, str] = EventPriority.NORMAL,
        signal: Optional[bool] = None,
    ) -> RunHareResponse:
        """
        Sign and send an event to the namespace endpoint.

        Args:
            event: Event name
            data: JSON-serializable event payload
            priority: "normal" (default) or "high"
            signal: Optional signal flag forwarded to the service

        Returns:
            Decoded service response {status, message, priority}, unchanged

        Raises:
            MessageFailedError: On any transport error or non-2xx response
        """
        envelope = self.build_envelope(event, data, priority, signal)
        signed = sign_payload(envelope, self.secret, self.ttl)

        await self._run_trace(envelope, signed.headers)

        timeout = httpx.Timeout(self.timeout, connect=Config.HTTP_CONNECT_TIMEOUT)

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    content=signed.payload.encode("utf-8"),
                    headers=signed.headers,
                )
                response.raise_for_status()
                body = response.json()
        except Exception as e:
            logger.warning(f"Failed to send event {event!r} to {self.namespace}: {e}")
            raise MessageFailedError(str(e)) from e

        logger.debug(f"Sent event {event!r} to {self.namespace}")
        return body


def create_client(
    namespace: str,
    secret: Optional[str] = None,
    origin: Optional[str] = None,
    **kwargs: Any,
) -> RunHareClient:
    """Create a RunHareClient bound to namespace."""
    return RunHareClient(namespace, secret=secret, origin=origin, **kwargs)
