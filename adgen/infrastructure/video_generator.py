from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from adgen.domain.errors import CapabilityUnavailableError

VIDEO_UNAVAILABLE_MESSAGE = (
    "Video generation is not available with the configured providers. "
    "Configure a video generation service such as Runway ML, Synthesia or Pika."
)


class VideoGenerator(ABC):
    """Animates a generated product image into a short video."""

    @abstractmethod
    def generate(
        self,
        image_url: str,
        prompt: str,
        aspect_ratio: Optional[str],
        duration: int,
    ) -> bytes:
        """Return the raw bytes of the video, or raise a GenerationError."""


class UnavailableVideoGenerator(VideoGenerator):
    """Stands in for a video provider until one is integrated; always refuses."""

    def generate(self, image_url, prompt, aspect_ratio, duration) -> bytes:
        raise CapabilityUnavailableError(VIDEO_UNAVAILABLE_MESSAGE)


# Providers selectable through VIDEO_PROVIDER
VIDEO_GENERATORS = {
    "none": UnavailableVideoGenerator,
}
