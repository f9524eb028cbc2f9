"""Tests for domain events and event handling."""
from __future__ import annotations

import logging
from datetime import datetime
from unittest.mock import Mock

from adgen.application.event_handlers import AuditLogHandler, ErrorReportingHandler
from adgen.domain.events import (
    CreditsReserved,
    DomainEvent,
    DomainEventPublisher,
    GenerationFailed,
    ProjectCreated,
    event_publisher,
)


def _failed(**overrides):
    values = dict(
        event_id="",
        timestamp=None,
        aggregate_id="project-1",
        user_id="user-1",
        action="image",
        error_type="UpstreamFailureError",
        message="Failed to generate image",
        refunded=True,
    )
    values.update(overrides)
    return GenerationFailed(**values)


class TestDomainEvent:
    """Test base domain event functionality."""

    def test_defaults_are_filled(self):
        """Test empty id and timestamp are generated."""
        event = DomainEvent(event_id="", timestamp=None, aggregate_id="project-1")

        assert event.event_id
        assert isinstance(event.timestamp, datetime)
        assert event.aggregate_id == "project-1"

    def test_custom_values_are_kept(self):
        custom_timestamp = datetime(2024, 1, 1, 12, 0, 0)

        event = ProjectCreated(
            event_id="evt-1",
            timestamp=custom_timestamp,
            aggregate_id="project-1",
            user_id="user-1",
            name="New Project",
            product_name="Ceramic Mug",
        )

        assert event.event_id == "evt-1"
        assert event.timestamp == custom_timestamp
        assert event.product_name == "Ceramic Mug"


class TestDomainEventPublisher:
    """Test the singleton publisher."""

    def test_singleton(self):
        assert DomainEventPublisher() is event_publisher

    def test_publish_to_matching_subscribers(self):
        failed_handler = Mock()
        reserved_handler = Mock()
        event_publisher.subscribe(GenerationFailed, failed_handler)
        event_publisher.subscribe(CreditsReserved, reserved_handler)

        event = _failed()
        event_publisher.publish(event)

        failed_handler.assert_called_once_with(event)
        reserved_handler.assert_not_called()

    def test_handler_error_does_not_propagate(self, caplog):
        """Test a failing handler is logged and others still run."""
        broken = Mock(side_effect=RuntimeError("handler broke"))
        healthy = Mock()
        event_publisher.subscribe(GenerationFailed, broken)
        event_publisher.subscribe(GenerationFailed, healthy)

        with caplog.at_level(logging.ERROR, logger="adgen.domain.events"):
            event_publisher.publish(_failed())

        healthy.assert_called_once()
        assert "Event handler error" in caplog.text

    def test_clear_subscribers(self):
        handler = Mock()
        event_publisher.subscribe(GenerationFailed, handler)

        event_publisher.clear_subscribers()
        event_publisher.publish(_failed())

        handler.assert_not_called()


class TestEventHandlers:

    def test_error_reporting_logs_failure(self, caplog):
        """Test generation failures reach the error log with their context."""
        with caplog.at_level(logging.ERROR, logger="adgen.errors"):
            ErrorReportingHandler().handle_generation_failed(_failed(action="video", refunded=False))

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "video generation failed for user user-1" in record.getMessage()
        assert "refunded=False" in record.getMessage()

    def test_audit_logs_reservation(self, caplog):
        event = CreditsReserved(
            event_id="", timestamp=None, aggregate_id="res-1", user_id="user-1", amount=5, action="image"
        )

        with caplog.at_level(logging.INFO, logger="adgen.application.event_handlers"):
            AuditLogHandler().handle_credits_reserved(event)

        assert "5 credits reserved from user user-1 for image" in caplog.text
