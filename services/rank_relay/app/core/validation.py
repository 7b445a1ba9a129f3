"""Inbound body parsing and rank change field validation."""

import json
import math
import re
from typing import Any

from services.rank_relay.app.core.errors import BadJSONError, InvalidBodyError, MissingFieldsError
from services.rank_relay.app.core.schemas import RankChangeRequest

# Largest integer a JSON number can carry without precision loss
MAX_SAFE_INTEGER = 2**53 - 1

RANK_CHANGE_FIELDS = ("groupId", "userId", "roleId")

# ASCII decimal literal: digits, optional fraction, optional exponent
NUMERIC_STRING = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_request_body(raw: Any) -> dict[str, Any]:
    """Parse an inbound body into a JSON object.

    Accepts an already-parsed JSON value, a JSON string, raw bytes (decoded
    as UTF-8) or None. An empty body is treated as ``{}``.

    Raises:
        BadJSONError: Body is not valid JSON or not valid UTF-8
        InvalidBodyError: Body parsed but is not a JSON object
    """
    if raw is None:
        return {}

    if isinstance(raw, (bytes, bytearray, memoryview)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise BadJSONError(f"Body is not valid UTF-8: {e.reason}") from e

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return {}
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise BadJSONError(f"Invalid JSON body: {e.msg}") from e
        except RecursionError as e:
            raise BadJSONError("Invalid JSON body: nested too deeply") from e
    else:
        parsed = raw

    if not isinstance(parsed, dict):
        raise InvalidBodyError(
            f"Body must be a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def coerce_positive_int(value: Any) -> int | None:
    """Coerce a JSON value to a positive safe integer, or None if it is not one.

    Numbers and numeric strings are accepted; booleans, null and containers
    are not.
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not NUMERIC_STRING.fullmatch(text):
            return None
        try:
            value = int(text)
        except ValueError:
            value = float(text)

    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)

    if not isinstance(value, int):
        return None
    if value <= 0 or value > MAX_SAFE_INTEGER:
        return None
    return value


def validate_rank_change(body: dict[str, Any]) -> RankChangeRequest:
    """Build a RankChangeRequest from a parsed body.

    Raises:
        MissingFieldsError: Naming every field that is absent or invalid
    """
    values: dict[str, int] = {}
    invalid: list[str] = []
    for field in RANK_CHANGE_FIELDS:
        coerced = coerce_positive_int(body.get(field))
        if coerced is None:
            invalid.append(field)
        else:
            values[field] = coerced

    if invalid:
        raise MissingFieldsError(invalid)

    return RankChangeRequest(
        group_id=values["groupId"],
        user_id=values["userId"],
        role_id=values["roleId"],
    )
