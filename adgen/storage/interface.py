from abc import ABC, abstractmethod

class AssetStore(ABC):
    """
    Abstract interface for asset storage. Supports both S3 and local filesystem.
    """

    @abstractmethod
    def upload(self, data: bytes, key: str, content_type: str = "image/png") -> str:
        """
        Save a binary asset and return its durable public URL.

        Args:
            data: Binary payload
            key: Storage key, relative path style (e.g. "projects/<user>/<id>.png")
            content_type: MIME type of the payload

        Returns:
            Public URL of the stored asset

        Raises:
            UpstreamFailureError: if the store rejects or fails the write
        """
        pass
