"""Ordered upstream attempt sequence for a rank change."""

from dataclasses import dataclass
from typing import Any, Callable

from services.rank_relay.app.config import Settings
from services.rank_relay.app.core.schemas import AttemptSpec, RankChangeRequest, UpstreamFamily

PayloadFactory = Callable[[RankChangeRequest], dict[str, Any] | None]


@dataclass(frozen=True)
class AttemptTemplate:
    """Data description of one candidate upstream call."""

    family: UpstreamFamily
    method: str
    path: str  # formatted with group_id, user_id, role_id
    payload: PayloadFactory

    @property
    def label(self) -> str:
        return f"{self.family.value}:{self.method}"


def _no_body(request: RankChangeRequest) -> None:
    return None


def _empty_body(request: RankChangeRequest) -> dict[str, Any]:
    return {}


def _role_body(request: RankChangeRequest) -> dict[str, Any]:
    return {"roleId": request.role_id}


CLOUD_V2_PATH = "/cloud/v2/groups/{group_id}/users/{user_id}/roles/{role_id}"
GROUPS_V1_PATH = "/v1/groups/{group_id}/users/{user_id}"

# Most preferred first. Cloud v2 carries the role in the path; Groups v1
# carries it in the body. The POST variants cover routes that reject PATCH.
ATTEMPT_TEMPLATES: tuple[AttemptTemplate, ...] = (
    AttemptTemplate(UpstreamFamily.CLOUD_V2, "PATCH", CLOUD_V2_PATH, _no_body),
    AttemptTemplate(UpstreamFamily.CLOUD_V2, "POST", CLOUD_V2_PATH, _empty_body),
    AttemptTemplate(UpstreamFamily.GROUPS_V1, "PATCH", GROUPS_V1_PATH, _role_body),
    AttemptTemplate(UpstreamFamily.GROUPS_V1, "POST", GROUPS_V1_PATH, _role_body),
)


def build_attempts(
    request: RankChangeRequest,
    settings: Settings,
    templates: tuple[AttemptTemplate, ...] = ATTEMPT_TEMPLATES,
) -> list[AttemptSpec]:
    """Expand attempt templates into concrete AttemptSpecs.

    Args:
        request: Validated rank change
        settings: Provides the base URL of each upstream family
        templates: Ordered attempt templates

    Returns:
        AttemptSpecs in the order they should be tried
    """
    base_urls = {
        UpstreamFamily.CLOUD_V2: settings.CLOUD_API_BASE_URL.rstrip("/"),
        UpstreamFamily.GROUPS_V1: settings.GROUPS_API_BASE_URL.rstrip("/"),
    }
    ids = {
        "group_id": request.group_id,
        "user_id": request.user_id,
        "role_id": request.role_id,
    }
    return [
        AttemptSpec(
            label=template.label,
            url=base_urls[template.family] + template.path.format(**ids),
            method=template.method,
            payload=template.payload(request),
        )
        for template in templates
    ]
