"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations


class DomainError(Exception):
    """Base for all domain errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Invalid input or state."""


class ConflictError(DomainError):
    """Resource conflict (e.g., generation already in progress)."""


class InsufficientCreditsError(DomainError):
    """User balance does not cover the cost of the requested action."""


class AuthenticationError(DomainError):
    """Missing or invalid credentials."""


class GenerationError(DomainError):
    """A paid action failed after credits were reserved; triggers compensation."""


class UpstreamFailureError(GenerationError):
    """Asset store or generation provider failed, timed out or returned nothing."""


class CapabilityUnavailableError(GenerationError):
    """The requested generation capability has no provider behind it."""
