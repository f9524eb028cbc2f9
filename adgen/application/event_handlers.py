"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adgen.domain.events import (
        ProjectCreated,
        ProjectDeleted,
        ImageGenerated,
        VideoGenerated,
        GenerationFailed,
        CreditsReserved,
        CreditsRefunded,
    )

logger = logging.getLogger(__name__)
error_logger = logging.getLogger("adgen.errors")


class AuditLogHandler:
    """Logs all domain events for audit trail."""

    def handle_project_created(self, event: ProjectCreated) -> None:
        logger.info(f"[AUDIT] Project created: {event.aggregate_id} - {event.name} for user {event.user_id}")

    def handle_project_deleted(self, event: ProjectDeleted) -> None:
        logger.info(f"[AUDIT] Project deleted: {event.aggregate_id} by user {event.user_id}")

    def handle_image_generated(self, event: ImageGenerated) -> None:
        logger.info(f"[AUDIT] Image generated for project {event.aggregate_id}: {event.image_url}")

    def handle_video_generated(self, event: VideoGenerated) -> None:
        logger.info(f"[AUDIT] Video generated for project {event.aggregate_id}: {event.video_url}")

    def handle_credits_reserved(self, event: CreditsReserved) -> None:
        logger.info(f"[AUDIT] {event.amount} credits reserved from user {event.user_id} for {event.action}")

    def handle_credits_refunded(self, event: CreditsRefunded) -> None:
        logger.info(f"[AUDIT] {event.amount} credits refunded to user {event.user_id} ({event.aggregate_id})")


class ErrorReportingHandler:
    """Reports failed generations to the operator-facing error log."""

    def handle_generation_failed(self, event: GenerationFailed) -> None:
        error_logger.error(
            f"[ERROR] {event.action} generation failed for user {event.user_id} "
            f"on {event.aggregate_id}: {event.error_type}: {event.message} "
            f"(refunded={event.refunded})"
        )


_registered = False


def register_event_handlers():
    """Register all event handlers with the publisher, once per process."""
    global _registered
    if _registered:
        return
    _registered = True

    from adgen.domain.events import (
        event_publisher,
        ProjectCreated,
        ProjectDeleted,
        ImageGenerated,
        VideoGenerated,
        GenerationFailed,
        CreditsReserved,
        CreditsRefunded,
    )

    audit = AuditLogHandler()
    errors = ErrorReportingHandler()

    # Audit handlers (all events)
    event_publisher.subscribe(ProjectCreated, audit.handle_project_created)
    event_publisher.subscribe(ProjectDeleted, audit.handle_project_deleted)
    event_publisher.subscribe(ImageGenerated, audit.handle_image_generated)
    event_publisher.subscribe(VideoGenerated, audit.handle_video_generated)
    event_publisher.subscribe(CreditsReserved, audit.handle_credits_reserved)
    event_publisher.subscribe(CreditsRefunded, audit.handle_credits_refunded)

    # Error reporting
    event_publisher.subscribe(GenerationFailed, errors.handle_generation_failed)
