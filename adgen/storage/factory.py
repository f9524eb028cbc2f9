from adgen.storage.interface import AssetStore
from adgen.storage.filesystem import FilesystemAssetStore
from adgen.storage.s3 import S3AssetStore
from adgen.config import settings

def get_asset_store() -> AssetStore:
    """
    Factory function to create the appropriate asset store implementation
    based on environment variables.

    Returns:
        An asset store implementation (S3 or Filesystem)
    """
    # Determine which storage to use
    storage_type = settings.STORAGE_TYPE.lower()

    if storage_type == "s3":
        if not settings.S3_BUCKET:
            raise ValueError("S3_BUCKET must be set when using S3 storage")

        return S3AssetStore(
            bucket_name=settings.S3_BUCKET,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
            timeout=settings.ASSET_UPLOAD_TIMEOUT,
        )
    else:
        # Use filesystem storage
        return FilesystemAssetStore(
            base_dir=settings.ASSET_STORAGE_DIR,
            base_url=settings.ASSET_BASE_URL,
        )
