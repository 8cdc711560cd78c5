"""
Notification content - display text, icons and media URLs for an event.

Everything here is cosmetic: derived from the record and the effective
config, with no effect on whether a notification is sent.
"""

import re
from dataclasses import dataclass

from ..config.schemas import PipelineConfig
from ..models import EventRecord
from ..utils.constants import DEFAULT_ICON, ICON_DIR
from ..utils.event_schema import EVENT_TYPE_END, EVENT_TYPE_NEW, EVENT_TYPE_UPDATE

LABEL_ICONS = {
    "person": "mdi:account-outline",
    "car": "mdi:car",
    "dog": "mdi:dog",
    "cat": "mdi:cat",
    "bird": "mdi:bird",
    "horse": "mdi:horse",
    "bicycle": "mdi:bicycle",
    "motorcycle": "mdi:motorbike",
    "bus": "mdi:bus",
    "truck": "mdi:truck",
    "boat": "mdi:sail-boat",
    "package": "mdi:package-variant-closed",
    "face": "mdi:face-recognition",
    "license_plate": "mdi:card-text-outline",
}

MESSAGE_TEMPLATES = {
    EVENT_TYPE_NEW: "A new {label} has been detected. [{short_id}]",
    EVENT_TYPE_UPDATE: "A {label} is still being detected. [{short_id}]",
    EVENT_TYPE_END: "A {label} is no longer detected. [{short_id}]",
}
DEFAULT_MESSAGE_TEMPLATE = "A {label} has been detected. [{short_id}]"


@dataclass(frozen=True)
class EventDisplay:
    """Display text and media links for one event."""

    camera_name: str
    title: str
    message: str
    icon: str
    icon_url: str
    clip_url: str
    snapshot_url: str
    thumbnail_url: str
    thumbnail_android: str
    video_ios: str
    review_url: str
    timeout_secs: int

    @property
    def channel(self) -> str:
        return f"{self.camera_name} Notifications"


def camera_display_name(camera: str, config: PipelineConfig) -> str:
    """
    Turn a camera id into a display name.

    "front_door" -> "Front Door"; with expand_cam, "cam_6" -> "Camera 6";
    with append_camera, "Driveway" -> "Driveway Camera".
    """
    name = re.sub(r"\b\w", lambda m: m.group().upper(), camera.replace("_", " "))
    if config.expand_cam:
        name = re.sub(r"\bcam\b", "Camera", name, flags=re.IGNORECASE)
    if config.append_camera and not re.search(r"camera$", name, re.IGNORECASE):
        name += " Camera"
    return name


def review_url(record: EventRecord, config: PipelineConfig) -> str:
    """Link to the event in the Frigate UI, or the Home Assistant proxy."""
    query = f"camera={record.camera}&id={record.object_id}"
    if config.frigate_url:
        frigate_base = re.sub(r"/review$", "", config.frigate_url.rstrip("/"))
        return f"{frigate_base}/review?{query}"
    return f"{config.base_url}/api/frigate/review?{query}"


def describe_event(record: EventRecord, config: PipelineConfig) -> EventDisplay:
    """Build display text and media URLs for a record."""
    camera_name = camera_display_name(record.camera, config)
    label_title = record.label[:1].upper() + record.label[1:]

    # Sub-label in the title keeps concurrent detections apart,
    # e.g. "Camera 6 - Car (Tom)" vs "Camera 6 - Car"
    if record.sub_label:
        title = f"{camera_name} - {label_title} ({record.sub_label})"
    else:
        title = f"{camera_name} - {label_title}"

    template = MESSAGE_TEMPLATES.get(record.event_type, DEFAULT_MESSAGE_TEMPLATE)
    message = template.format(label=record.label, short_id=record.short_id)

    base = f"{config.base_url}/api/frigate/notifications/{record.object_id}"
    thumbnail_url = f"{base}/thumbnail.jpg"

    return EventDisplay(
        camera_name=camera_name,
        title=title,
        message=message,
        icon=LABEL_ICONS.get(record.label, DEFAULT_ICON),
        icon_url=f"{ICON_DIR}/{record.label}.png",
        clip_url=f"{base}/{record.camera}/clip.mp4",
        snapshot_url=f"{base}/snapshot.jpg",
        thumbnail_url=thumbnail_url,
        thumbnail_android=f"{thumbnail_url}?format=android",
        video_ios=f"{base}/{record.camera}/master.m3u8",
        review_url=review_url(record, config),
        timeout_secs=int(config.notification_timeout_hours * 3600),
    )
