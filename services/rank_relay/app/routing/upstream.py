"""HTTP client for the upstream rank-change APIs."""

import asyncio
import json
import time
from typing import Any

import httpx

from services.rank_relay.app.core.schemas import AttemptResult, AttemptSpec
from shared.utils.logging import get_logger
from shared.utils.metrics import record_upstream_attempt

logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"
TIMEOUT_STATUS_TEXT = "TIMEOUT"
NETWORK_ERROR_STATUS_TEXT = "NETWORK_ERROR"


def parse_upstream_body(text: str) -> Any:
    """Parse an upstream body, never raising.

    Empty bodies become ``{}``; text that is not JSON becomes ``{"raw": text}``.
    """
    if not text:
        return {}
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return {"raw": text}


class UpstreamClient:
    """Sends AttemptSpecs to the upstream APIs, one call at a time.

    Use as an async context manager; the underlying httpx client lives only
    for the duration of one inbound request.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 12.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize upstream client.

        Args:
            api_key: Credential sent in the x-api-key header
            timeout: Total time allowed per attempt, in seconds
            transport: Optional httpx transport (tests inject a mock)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "UpstreamClient":
        self._client = httpx.AsyncClient(
            transport=self.transport,
            timeout=httpx.Timeout(self.timeout),
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, attempt: AttemptSpec) -> dict[str, str]:
        headers = {API_KEY_HEADER: self.api_key}
        if attempt.payload is not None:
            headers["content-type"] = "application/json"
        return headers

    async def _request(self, attempt: AttemptSpec) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("UpstreamClient used outside of 'async with'")
        content = None
        if attempt.payload is not None:
            content = json.dumps(attempt.payload).encode("utf-8")
        return await self._client.request(
            method=attempt.method,
            url=attempt.url,
            headers=self._build_headers(attempt),
            content=content,
        )

    async def send(self, attempt: AttemptSpec) -> AttemptResult:
        """Issue one upstream call and describe its outcome.

        Timeouts and transport failures are reported as results with
        status 0, not raised.

        Args:
            attempt: The upstream call to make

        Returns:
            AttemptResult for this attempt
        """
        start_time = time.perf_counter()
        try:
            response = await asyncio.wait_for(self._request(attempt), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            result = AttemptResult(
                label=attempt.label,
                succeeded=False,
                http_status=0,
                status_text=TIMEOUT_STATUS_TEXT,
                response_body=None,
                network_error=f"Timed out after {self.timeout:g}s",
                timed_out=True,
            )
            outcome = "timeout"
        except httpx.RequestError as e:
            result = AttemptResult(
                label=attempt.label,
                succeeded=False,
                http_status=0,
                status_text=NETWORK_ERROR_STATUS_TEXT,
                response_body=None,
                network_error=str(e) or type(e).__name__,
            )
            outcome = "network_error"
        else:
            succeeded = response.is_success
            result = AttemptResult(
                label=attempt.label,
                succeeded=succeeded,
                http_status=response.status_code,
                status_text=response.reason_phrase,
                response_body=parse_upstream_body(response.text),
            )
            outcome = "success" if succeeded else "http_error"

        duration = time.perf_counter() - start_time
        record_upstream_attempt(
            family=attempt.family.value,
            method=attempt.method,
            outcome=outcome,
            duration=duration,
        )
        logger.info(
            "upstream_attempt",
            label=result.label,
            status=result.http_status,
            status_text=result.status_text,
            duration_ms=round(duration * 1000, 1),
        )
        return result
