import os
from adgen.storage.interface import AssetStore
from adgen.domain.errors import UpstreamFailureError, ValidationError

class FilesystemAssetStore(AssetStore):
    """
    Implements asset storage using the local filesystem.

    Files are served by the API under ``base_url`` (see adgen.main).
    """

    def __init__(self, base_dir: str = None, base_url: str = "http://localhost:8000/assets"):
        """
        Initialize filesystem storage.

        Args:
            base_dir: Base directory for storing assets.
                      If None, uses 'assets' in the current working directory.
            base_url: Public URL prefix the base directory is served under
        """
        if base_dir is None:
            base_dir = os.path.join(os.getcwd(), "assets")

        self.base_dir = os.path.abspath(base_dir)
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    def upload(self, data: bytes, key: str, content_type: str = "image/png") -> str:
        """
        Save an asset to the filesystem.

        Returns:
            Public URL of the saved file
        """
        file_path = self._path_for(key)
        try:
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise UpstreamFailureError(f"Failed to store asset {key}: {e}") from e

        return f"{self.base_url}/{key}"

    def _path_for(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.base_dir, key))
        if not path.startswith(self.base_dir + os.sep):
            raise ValidationError(f"Invalid asset key: {key}")
        return path
