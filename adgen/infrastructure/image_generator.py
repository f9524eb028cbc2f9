from __future__ import annotations

import base64
import binascii
import logging
from abc import ABC, abstractmethod

from openai import OpenAI, OpenAIError

from adgen.domain.errors import UpstreamFailureError

logger = logging.getLogger(__name__)


class ImageGenerator(ABC):
    """Produces one image from a text prompt."""

    @abstractmethod
    def generate(self, prompt: str, size: str, quality: str) -> bytes:
        """Return the raw bytes of the generated image, or raise UpstreamFailureError."""


class OpenAIImageGenerator(ImageGenerator):
    """Image generation through the OpenAI Images API.

    The client is built with ``max_retries=0``: a failed call is reported
    back to the workflow, which refunds the user instead of retrying.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "dall-e-3",
        timeout: float = 120.0,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> OpenAI:
        # Built on first use so requests that never generate need no API key
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key or None, timeout=self._timeout, max_retries=0)
        return self._client

    def generate(self, prompt: str, size: str = "1024x1024", quality: str = "hd") -> bytes:
        logger.info(f"Generating image with {self.model}: {prompt[:100]}...")
        try:
            response = self.client.images.generate(
                model=self.model,
                prompt=prompt,
                n=1,
                size=size,
                quality=quality,
                response_format="b64_json",
            )
        except OpenAIError as e:
            raise UpstreamFailureError(f"Image generation failed: {e}") from e

        data = getattr(response, "data", None) or []
        payload = getattr(data[0], "b64_json", None) if data else None
        if not payload:
            raise UpstreamFailureError("Failed to generate image")

        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise UpstreamFailureError(f"Image payload could not be decoded: {e}") from e
