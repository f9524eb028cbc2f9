"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    event_id: str
    timestamp: datetime
    aggregate_id: str

    def __post_init__(self):
        if not hasattr(self, 'event_id') or not self.event_id:
            object.__setattr__(self, 'event_id', str(uuid4()))
        if not hasattr(self, 'timestamp') or not self.timestamp:
            object.__setattr__(self, 'timestamp', datetime.now())


@dataclass
class ProjectCreated(DomainEvent):
    """Raised when a generation project record is created."""
    user_id: str
    name: str
    product_name: str


@dataclass
class ProjectDeleted(DomainEvent):
    """Raised when a project is deleted by its owner."""
    user_id: str


@dataclass
class ImageGenerated(DomainEvent):
    """Raised when a project's composite image is stored."""
    user_id: str
    image_url: str


@dataclass
class VideoGenerated(DomainEvent):
    """Raised when a project's video is stored."""
    user_id: str
    video_url: str


@dataclass
class GenerationFailed(DomainEvent):
    """Raised when a paid action fails and has been compensated."""
    user_id: str
    action: str
    error_type: str
    message: str
    refunded: bool


@dataclass
class CreditsReserved(DomainEvent):
    """Raised when credits are taken for a paid action. aggregate_id is the reservation id."""
    user_id: str
    amount: int
    action: str


@dataclass
class CreditsRefunded(DomainEvent):
    """Raised when a reservation is returned to the user. aggregate_id is the reservation id."""
    user_id: str
    amount: int


class DomainEventPublisher:
    """Singleton publisher for domain events."""

    _instance: DomainEventPublisher | None = None
    _subscribers: Dict[type, List[Callable[[DomainEvent], None]]]

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._subscribers = {}
        return cls._instance

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        event_type = type(event)
        if event_type in self._subscribers:
            for handler in self._subscribers[event_type]:
                try:
                    handler(event)
                except Exception:
                    # Log error but don't fail the main operation
                    logger.exception("Event handler error for %s", event_type.__name__)

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


# Singleton instance
event_publisher = DomainEventPublisher()
