"""Rank change relay route."""

from fastapi import APIRouter, Request, Response, status

from services.rank_relay.app.api.responses import error_json, relay_json
from services.rank_relay.app.core.errors import MethodNotAllowedError, RelayError, unhandled_response
from services.rank_relay.app.core.schemas import RelayResponse
from services.rank_relay.app.core.validation import parse_request_body, validate_rank_change
from services.rank_relay.app.dependencies import Relay
from shared.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Rank Relay"])

PROMOTE_METHODS = ("POST", "OPTIONS")

# Every verb is routed here so the handler, not the framework, answers 405
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/promote", methods=ROUTED_METHODS)
async def promote(request: Request, relay: Relay) -> Response:
    """Change a group member's role through the first upstream API that accepts it.

    Body: ``{"groupId": int, "userId": int, "roleId": int}``.
    """
    try:
        if request.method == "OPTIONS":
            return relay_json(
                RelayResponse(ok=True),
                status_code=status.HTTP_200_OK,
                allowed_methods=PROMOTE_METHODS,
                include_allow=True,
            )
        if request.method != "POST":
            raise MethodNotAllowedError(request.method, PROMOTE_METHODS)

        relay.require_key()
        body = parse_request_body(await request.body())
        rank_change = validate_rank_change(body)
        result = await relay.promote(rank_change)
        return relay_json(
            result,
            status_code=status.HTTP_200_OK,
            allowed_methods=PROMOTE_METHODS,
        )

    except RelayError as e:
        log = logger.warning if e.status_code >= 500 else logger.info
        log("relay_rejected", code=e.code, status_code=e.status_code, reason=e.message)
        return error_json(e, allowed_methods=PROMOTE_METHODS)

    except Exception as e:
        logger.exception("relay_unhandled_error", error=str(e), error_type=type(e).__name__)
        return relay_json(
            unhandled_response(e),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            allowed_methods=PROMOTE_METHODS,
        )
