"""
Notification Synthesizer - Builds per-device notification payloads.

Two entry points share one payload shape:

- build_notifications: the initial alert for an event that passed every
  filter. Uses the default title/message and plays the alert sound.
- build_enriched_notifications: rebuilt after an object's lifecycle ends
  and an external summarization step produced better text. Uses the same
  tag, so the device replaces the original notification in place, and
  does not sound again.

The tag is the tracked object id: concurrent detections on one camera
keep independent notifications. The group is the camera display name so
the OS still stacks them together.
"""

import dataclasses
import logging
import time
from collections.abc import Mapping
from typing import Any

from ..config.schemas import PipelineConfig
from ..models import EnrichmentResponse, EventRecord, NotificationPayload
from ..utils.constants import SILENCE_ACTION_NAMESPACE
from ..utils.event_schema import PLATFORM_ANDROID, PLATFORM_IOS
from .content import EventDisplay, describe_event

logger = logging.getLogger(__name__)

IOS_SUBTITLE_INITIAL = "Expand me, or just click for a live view."
IOS_SUBTITLE_ENRICHED = "Tap to view clip."
IOS_CRITICAL_SOUND = {"name": "Alarm_Haptic.caf", "critical": 1, "volume": 1}


def silence_action_id(camera: str) -> str:
    """Action id of the Silence button; deterministic per camera."""
    return f"SILENCE_{SILENCE_ACTION_NAMESPACE}__{camera}"


def notify_service(name: str) -> str:
    """Normalize a service name to "notify.<service>" form."""
    return name if name.startswith("notify.") else f"notify.{name}"


def _android_data(
    record: EventRecord, display: EventDisplay, now: int, enriched: bool
) -> dict[str, Any]:
    camera_entity = f"camera.{record.camera}"
    return {
        "channel": display.channel,
        "importance": "high",
        "ttl": 0,
        "priority": "high",
        "tag": record.object_id,
        "group": display.camera_name,
        # No sound or vibration when a tag is re-posted
        "alert_once": True,
        "timeout": display.timeout_secs,
        "notification_icon": display.icon,
        "sticky": not enriched,
        "color": "red",
        "icon_url": display.icon_url,
        "image": f"{display.thumbnail_android}&t={now}",
        "clickAction": display.clip_url if record.has_clip else display.snapshot_url,
        "actions": [
            {"action": "URI", "title": "View Live", "uri": f"entityId:{camera_entity}"},
            {"action": "URI", "title": "View Clip", "uri": display.clip_url},
            {"action": silence_action_id(record.camera), "title": "Silence"},
        ],
        "when": now,
    }


def _ios_data(
    record: EventRecord, display: EventDisplay, now: int, enriched: bool
) -> dict[str, Any]:
    camera_entity = f"camera.{record.camera}"
    media_url = display.video_ios if record.has_clip else display.snapshot_url
    return {
        "subtitle": IOS_SUBTITLE_ENRICHED if enriched else IOS_SUBTITLE_INITIAL,
        "tag": record.object_id,
        "group": display.camera_name,
        "url": media_url,
        "attachment": {"url": f"{display.thumbnail_url}?t={now}"},
        # The enriched rebuild is a silent content update; the initial
        # alert already sounded
        "push": {} if enriched else {"sound": dict(IOS_CRITICAL_SOUND)},
        "apns_headers": {"apns-collapse-id": record.object_id},
        "entity_id": camera_entity,
        "actions": [
            {"action": "URI", "title": "View Live", "uri": f"entityId:{camera_entity}"},
            {"action": "URI", "title": "View Clip", "uri": media_url},
            {
                "action": silence_action_id(record.camera),
                "title": "Silence",
                "textInputButtonTitle": "Submit",
                "textInputPlaceholder": "Duration (minutes)",
            },
        ],
    }


def _build_payloads(
    record: EventRecord,
    config: PipelineConfig,
    display: EventDisplay,
    title: str,
    message: str,
    now: int,
    enriched: bool,
) -> list[NotificationPayload]:
    payloads = []

    for service_name, platform in config.notify_devices:
        service = notify_service(service_name)

        if platform == PLATFORM_ANDROID:
            platform_data = _android_data(record, display, now, enriched)
        elif platform == PLATFORM_IOS:
            platform_data = _ios_data(record, display, now, enriched)
        else:
            # Also reported once by the config validator
            logger.log(
                logging.WARNING if config.debug else logging.DEBUG,
                f'Unknown device platform "{platform}" for service "{service}" - skipping',
            )
            continue

        payloads.append(
            NotificationPayload(
                service=service,
                platform=platform,
                data={"title": title, "message": message, "data": platform_data},
            )
        )

    return payloads


def build_notifications(
    record: EventRecord,
    config: PipelineConfig,
    now: float | None = None,
) -> tuple[list[NotificationPayload], EventRecord]:
    """
    Build the initial notification for every configured device.

    Args:
        record: Event that passed every filter
        config: Effective config for the event
        now: Current Unix time (defaults to time.time())

    Returns:
        (payloads, record) where record has best_score_sent advanced to
        the event's score
    """
    now_ts = int(time.time() if now is None else now)
    display = describe_event(record, config)

    payloads = _build_payloads(
        record, config, display, display.title, display.message, now_ts, enriched=False
    )
    logger.debug(f"Built {len(payloads)} notification(s) for {record.object_id}")

    return payloads, dataclasses.replace(record, best_score_sent=record.score)


def build_enriched_notifications(
    record: EventRecord,
    config: PipelineConfig,
    enrichment: EnrichmentResponse | Mapping[str, Any] | None,
    now: float | None = None,
) -> list[NotificationPayload]:
    """
    Build replacement notifications carrying summarized text.

    The title is replaced only when generate_title is enabled and a title
    was produced. The message is replaced when text was produced, with the
    short event id appended for correlation.

    Args:
        record: Record of the finished event
        config: Effective config for the event
        enrichment: Summarization output ({response_title, response_text})
        now: Current Unix time (defaults to time.time())

    Returns:
        Payloads with the same tags as the initial notifications
    """
    if enrichment is None:
        enrichment = EnrichmentResponse()
    elif not isinstance(enrichment, EnrichmentResponse):
        enrichment = EnrichmentResponse.model_validate(dict(enrichment))

    now_ts = int(time.time() if now is None else now)
    display = describe_event(record, config)

    title = display.title
    if config.generate_title and enrichment.response_title:
        title = enrichment.response_title

    message = display.message
    if enrichment.response_text:
        message = f"{enrichment.response_text} [{record.short_id}]"

    return _build_payloads(
        record, config, display, title, message, now_ts, enriched=True
    )
