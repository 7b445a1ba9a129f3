"""FastAPI dependency injection."""

from typing import Annotated

import httpx
from fastapi import Depends

from services.rank_relay.app.config import Settings, get_settings
from services.rank_relay.app.core.relay import RankRelay


def get_upstream_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for upstream calls. None selects httpx's network transport."""
    return None


def get_rank_relay(
    settings: Annotated[Settings, Depends(get_settings)],
    transport: Annotated[httpx.AsyncBaseTransport | None, Depends(get_upstream_transport)],
) -> RankRelay:
    """Get a relay for one inbound request."""
    return RankRelay(settings=settings, transport=transport)


# Type aliases for cleaner function signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Relay = Annotated[RankRelay, Depends(get_rank_relay)]
