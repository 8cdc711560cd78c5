"""
Event Dispatcher

Feeds raw Frigate events to the notification pipeline and keeps session
statistics. The transport that produces the events (MQTT subscriber, file,
stdin) lives outside this module.

In queue mode: receives from a multiprocessing.Queue until a None sentinel
In batch mode: iterates over already-decoded events
"""

import json
import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timezone
from multiprocessing import Queue
from typing import Any

from ..utils.event_schema import get_event_summary
from .pipeline import NotificationPipeline, PipelineResult

logger = logging.getLogger(__name__)


class DispatchStats:
    """Counters for one dispatcher session."""

    def __init__(self):
        self.start_time = datetime.now(timezone.utc)
        self.events = 0
        self.invalid = 0
        self.notified_by_camera: Counter = Counter()
        self.drops_by_stage: Counter = Counter()

    def record(self, result: PipelineResult) -> None:
        self.events += 1
        if result.drop is not None:
            self.drops_by_stage[result.drop.stage] += 1
        elif result.notified:
            self.notified_by_camera[result.record.camera] += 1

    def log_summary(self) -> None:
        elapsed = (datetime.now(timezone.utc) - self.start_time).total_seconds()
        elapsed_str = (
            f"{elapsed / 60:.1f} minutes" if elapsed >= 60 else f"{elapsed:.0f} seconds"
        )
        notified = sum(self.notified_by_camera.values())

        logger.info("=" * 50)
        logger.info(f"Session: {elapsed_str}, {self.events} events, {notified} notified")
        if self.notified_by_camera:
            camera_summary = ", ".join(
                f"{count} {camera}"
                for camera, count in self.notified_by_camera.most_common()
            )
            logger.info(f"  Notified: {camera_summary}")
        if self.drops_by_stage:
            drop_summary = ", ".join(
                f"{count} {stage}" for stage, count in self.drops_by_stage.most_common()
            )
            logger.info(f"  Dropped: {drop_summary}")
        if self.invalid:
            logger.info(f"  Undecodable: {self.invalid}")
        logger.info("=" * 50)


def decode_event(message: Any) -> dict | None:
    """
    Decode an event message.

    Accepts an already-decoded dict, or a JSON str/bytes payload as
    delivered by an MQTT client.

    Returns:
        The event dict, or None if the message cannot be decoded
    """
    if isinstance(message, dict):
        return message
    if isinstance(message, (bytes, bytearray)):
        message = message.decode("utf-8", errors="replace")
    if not isinstance(message, str):
        return None
    try:
        event = json.loads(message)
    except ValueError as e:
        logger.warning(f"Invalid event JSON: {e}")
        return None
    return event if isinstance(event, dict) else None


def _process(message: Any, pipeline: NotificationPipeline, stats: DispatchStats):
    event = decode_event(message)
    if event is None:
        stats.invalid += 1
        return None

    logger.debug(f"Event: {get_event_summary(event)}")
    result = pipeline.handle(event)
    stats.record(result)
    return result


def process_events(
    events: Iterable[Any], pipeline: NotificationPipeline
) -> list[PipelineResult]:
    """
    Run a batch of events through the pipeline.

    Args:
        events: Raw event messages
        pipeline: Configured pipeline

    Returns:
        One PipelineResult per decodable event, in order
    """
    stats = DispatchStats()
    results = []
    for message in events:
        try:
            result = _process(message, pipeline, stats)
        except Exception as e:
            logger.error(f"Error processing event: {e}", exc_info=True)
            continue
        if result is not None:
            results.append(result)
    stats.log_summary()
    return results


def dispatch_events(data_queue: Queue, pipeline: NotificationPipeline) -> DispatchStats:
    """
    Central event dispatcher - consumes events until a None sentinel.

    One failing event is logged and skipped; it never stops the loop.

    Args:
        data_queue: Queue receiving raw Frigate events
        pipeline: Configured pipeline

    Returns:
        Session statistics
    """
    stats = DispatchStats()
    logger.info("Dispatcher started")

    try:
        while True:
            message = data_queue.get()

            if message is None:
                logger.info("Received shutdown signal")
                break

            try:
                _process(message, pipeline, stats)
            except Exception as e:
                logger.error(f"Error processing event: {e}", exc_info=True)

    except KeyboardInterrupt:
        logger.info("Dispatcher interrupted")
    finally:
        stats.log_summary()
        logger.info(f"Dispatcher shutdown complete ({stats.events} events processed)")

    return stats
