"""Async HTTP client that walks an ordered relay chain."""

import asyncio
import time
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog

from status_radar.fetch.config import FetchConfig
from status_radar.fetch.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
)
from status_radar.fetch.metrics import FetchMetrics
from status_radar.fetch.models import (
    FetchError,
    FetchErrorClass,
    RelayAttempt,
    RelayOutcome,
)
from status_radar.fetch.relays import Relay


logger = structlog.get_logger()

# Applied to each decoded body; None marks the body as unusable
ParseFn = Callable[[Any], Any | None]


class RelayFetcher:
    """Fetches a JSON document through an ordered list of relays.

    Provides:
    - Strict in-order relay fallback, no retry of the same relay
    - Independent per-attempt timeout enforced by cancellation
    - Failures returned as values on the outcome, never raised
    - Optional parse hook so unusable bodies also advance the chain
    - Metrics collection
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            config: Fetch configuration.
            client: Shared async client; a short-lived client is created per
                chain when omitted.
        """
        self._config = config or FetchConfig()
        self._client = client
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch")

    @property
    def config(self) -> FetchConfig:
        """Get the fetch configuration."""
        return self._config

    @asynccontextmanager
    async def _client_scope(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(
            timeout=self._config.relay_timeout_seconds,
            follow_redirects=self._config.follow_redirects,
        ) as client:
            yield client

    async def fetch_via_relays(
        self,
        url: str,
        relays: Sequence[Relay],
        timeout_ms: int | None = None,
        parse: ParseFn | None = None,
        *,
        service_id: str | None = None,
    ) -> RelayOutcome:
        """Fetch a URL through the first relay that yields a usable body.

        Args:
            url: Target URL.
            relays: Ordered, non-empty relay chain.
            timeout_ms: Per attempt timeout; defaults to the configured value.
            parse: Optional hook applied to each decoded body.
            service_id: Service identifier for logging.

        Returns:
            RelayOutcome with the first usable payload or a terminal failure.

        Raises:
            ValueError: If the relay chain is empty.
        """
        if not relays:
            msg = "At least one relay is required"
            raise ValueError(msg)

        timeout_s = (
            timeout_ms / 1000.0
            if timeout_ms is not None
            else self._config.relay_timeout_seconds
        )
        log = self._log.bind(service_id=service_id, url=url)
        attempts: list[RelayAttempt] = []

        async with self._client_scope() as client:
            for relay in relays:
                payload, attempt = await self._attempt(
                    client, relay, url, timeout_s, parse
                )
                attempts.append(attempt)
                self._metrics.record_attempt(relay.name, attempt.duration_ms)

                if attempt.error is None:
                    self._metrics.record_success(relay.name)
                    log.debug(
                        "relay_attempt_succeeded",
                        relay=relay.name,
                        duration_ms=round(attempt.duration_ms, 2),
                    )
                    return RelayOutcome.success(payload, relay.name, attempts)

                self._metrics.record_failure(attempt.error.error_class)
                log.info(
                    "relay_attempt_failed",
                    relay=relay.name,
                    error_class=attempt.error.error_class.value,
                    error=attempt.error.message,
                    duration_ms=round(attempt.duration_ms, 2),
                )

        self._metrics.record_exhausted()
        log.warning("relay_chain_exhausted", relay_count=len(relays))
        return RelayOutcome.failure(attempts)

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        relay: Relay,
        url: str,
        timeout_s: float,
        parse: ParseFn | None,
    ) -> tuple[Any, RelayAttempt]:
        """Execute a single relay attempt.

        Args:
            client: Async HTTP client.
            relay: Relay to go through.
            url: Target URL.
            timeout_s: Attempt timeout in seconds.
            parse: Optional parse hook.

        Returns:
            Tuple of (payload or None, attempt record).
        """
        start = time.perf_counter()
        payload, error = await self._request(client, relay, url, timeout_s)

        if error is None and parse is not None:
            try:
                parsed = parse(payload)
            except Exception as e:  # noqa: BLE001
                error = FetchError(
                    error_class=FetchErrorClass.NORMALIZATION_FAILED,
                    message=f"Parse failed: {type(e).__name__}: {e}",
                )
                payload = None
            else:
                if parsed is None:
                    error = FetchError(
                        error_class=FetchErrorClass.NORMALIZATION_FAILED,
                        message="Response carried no usable status",
                    )
                payload = parsed

        duration_ms = (time.perf_counter() - start) * 1000.0
        return payload, RelayAttempt(
            relay=relay.name, duration_ms=duration_ms, error=error
        )

    async def _request(
        self,
        client: httpx.AsyncClient,
        relay: Relay,
        url: str,
        timeout_s: float,
    ) -> tuple[Any, FetchError | None]:
        request_url = relay.build_request_url(url)
        try:
            async with asyncio.timeout(timeout_s):
                response = await client.get(
                    request_url, headers=self._config.build_headers()
                )
        except (TimeoutError, httpx.TimeoutException):
            return None, FetchError(
                error_class=FetchErrorClass.NETWORK_TIMEOUT,
                message=f"Request timed out after {round(timeout_s * 1000)}ms",
            )
        except httpx.TransportError as e:
            return None, FetchError(
                error_class=FetchErrorClass.CONNECTION_ERROR,
                message=f"Connection failed: {type(e).__name__}: {e}",
            )
        except Exception as e:  # noqa: BLE001
            return None, FetchError(
                error_class=FetchErrorClass.UNKNOWN,
                message=f"Unexpected error: {type(e).__name__}: {e}",
            )

        http_error = classify_http_status(response.status_code)
        if http_error is not None:
            return None, http_error

        try:
            return response.json(), None
        except (ValueError, RecursionError) as e:
            return None, FetchError(
                error_class=FetchErrorClass.INVALID_JSON,
                message=f"Invalid JSON body: {e}",
                status_code=response.status_code,
            )


def classify_http_status(status_code: int) -> FetchError | None:
    """Classify an HTTP status code as error.

    Args:
        status_code: HTTP status code.

    Returns:
        FetchError if status indicates error, None otherwise.
    """
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return None

    if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
        return FetchError(
            error_class=FetchErrorClass.HTTP_4XX,
            message=f"Client error ({status_code})",
            status_code=status_code,
        )

    if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
        return FetchError(
            error_class=FetchErrorClass.HTTP_5XX,
            message=f"Server error ({status_code})",
            status_code=status_code,
        )

    return FetchError(
        error_class=FetchErrorClass.UNKNOWN,
        message=f"Unexpected status ({status_code})",
        status_code=status_code,
    )
