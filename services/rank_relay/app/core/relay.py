"""Rank change relay: drives the upstream attempt sequence."""

import httpx

from services.rank_relay.app.config import Settings
from services.rank_relay.app.core.errors import AllAttemptsFailedError, MissingKeyError
from services.rank_relay.app.core.schemas import AttemptResult, RankChangeRequest, RelayResponse
from services.rank_relay.app.routing.attempts import build_attempts
from services.rank_relay.app.routing.upstream import UpstreamClient
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class RankRelay:
    """Forwards a rank change to the first upstream endpoint that accepts it."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize relay.

        Args:
            settings: Service settings holding the credential and upstream URLs
            transport: Optional httpx transport for upstream calls
        """
        self.settings = settings
        self.transport = transport

    def require_key(self) -> str:
        """Return the configured credential.

        Raises:
            MissingKeyError: If the credential is absent or blank
        """
        if not self.settings.has_open_cloud_key:
            raise MissingKeyError()
        return self.settings.OPEN_CLOUD_KEY.strip()

    async def promote(self, request: RankChangeRequest) -> RelayResponse:
        """Try each upstream attempt in order until one succeeds.

        Args:
            request: Validated rank change

        Returns:
            Success RelayResponse naming the winning upstream family

        Raises:
            MissingKeyError: If no credential is configured
            AllAttemptsFailedError: If every attempt failed
        """
        api_key = self.require_key()
        attempts = build_attempts(request, self.settings)
        failures: list[AttemptResult] = []

        async with UpstreamClient(
            api_key=api_key,
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
            transport=self.transport,
        ) as client:
            for attempt in attempts:
                result = await client.send(attempt)
                if result.succeeded:
                    logger.info(
                        "relay_succeeded",
                        label=result.label,
                        status=result.http_status,
                        group_id=request.group_id,
                        user_id=request.user_id,
                        role_id=request.role_id,
                    )
                    return RelayResponse(
                        ok=True,
                        where=attempt.family,
                        status=result.http_status,
                    )
                failures.append(result)

        logger.warning(
            "relay_all_attempts_failed",
            group_id=request.group_id,
            user_id=request.user_id,
            role_id=request.role_id,
            statuses=[f.http_status for f in failures],
        )
        raise AllAttemptsFailedError(failures)
