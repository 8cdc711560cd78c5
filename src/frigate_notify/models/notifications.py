"""
Notification models - payloads produced by the synthesizer.

A payload is opaque to the pipeline once built: the host turns it into a
Home Assistant service call and does not report success back.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class NotificationPayload:
    """
    One notification for one device.

    Attributes:
        service: Notify service, always in "notify.<name>" form
        platform: "android" or "ios"
        data: Service data: {"title", "message", "data": {...platform fields}}
    """

    service: str
    platform: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.data.get("title", "")

    @property
    def message(self) -> str:
        return self.data.get("message", "")

    @property
    def tag(self) -> str:
        """Deduplication tag; equal to the tracked object id."""
        return self.data.get("data", {}).get("tag", "")

    @property
    def group(self) -> str:
        """Notification group; equal to the camera display name."""
        return self.data.get("data", {}).get("group", "")

    def to_service_call(self) -> dict[str, Any]:
        """Return the Home Assistant service call for this payload."""
        return {"action": self.service, "data": self.data}


class EnrichmentResponse(BaseModel):
    """
    Text produced by the external summarization step for a finished event.

    Either field may be missing; missing fields fall back to the default
    title/message.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    response_title: str | None = Field(
        default=None, validation_alias=AliasChoices("response_title", "responseTitle")
    )
    response_text: str | None = Field(
        default=None, validation_alias=AliasChoices("response_text", "responseText")
    )
