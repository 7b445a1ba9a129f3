"""Pydantic schemas for the Rank Relay service."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UpstreamFamily(str, Enum):
    """Upstream REST families a rank change can be sent to."""

    CLOUD_V2 = "cloudV2"
    GROUPS_V1 = "groupsV1"


class WireModel(BaseModel):
    """Base model with camelCase JSON field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the JSON response body."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RankChangeRequest(WireModel):
    """Validated inbound rank change."""

    group_id: int = Field(gt=0)
    user_id: int = Field(gt=0)
    role_id: int = Field(gt=0)


class AttemptSpec(WireModel):
    """One candidate upstream call."""

    label: str
    url: str
    method: Literal["PATCH", "POST"]
    payload: dict[str, Any] | None = None

    @property
    def family(self) -> UpstreamFamily:
        """Upstream family, taken from the label prefix."""
        prefix = self.label.split(":", 1)[0]
        return UpstreamFamily(prefix)


class AttemptResult(WireModel):
    """Outcome of one upstream call."""

    label: str
    succeeded: bool
    http_status: int
    status_text: str
    response_body: Any = None
    network_error: str | None = None
    timed_out: bool = False

    # Keep responseBody on the wire even when the upstream sent JSON null
    def to_wire(self) -> dict[str, Any]:
        data = super().to_wire()
        data.setdefault("responseBody", None)
        return data


class RelayResponse(WireModel):
    """Terminal JSON reply for one inbound request."""

    ok: bool
    where: UpstreamFamily | None = None
    status: int | None = None
    code: str | None = None
    error: str | None = None
    hint: str | None = None
    invalid: list[str] | None = None
    allowed: list[str] | None = None
    detail: str | None = None
    attempts: list[AttemptResult] | None = None

    def to_wire(self) -> dict[str, Any]:
        data = super().to_wire()
        if self.attempts is not None:
            data["attempts"] = [attempt.to_wire() for attempt in self.attempts]
        return data
