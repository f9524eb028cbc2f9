import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from adgen.storage.interface import AssetStore
from adgen.domain.errors import UpstreamFailureError

class S3AssetStore(AssetStore):
    """
    Implements asset storage using AWS S3.
    """

    def __init__(self, bucket_name: str, aws_access_key_id: str = None,
                 aws_secret_access_key: str = None, region_name: str = None,
                 timeout: float = 30.0, public_base_url: str = None, s3_client=None):
        """
        Initialize S3 storage.

        Args:
            bucket_name: S3 bucket name
            aws_access_key_id: AWS access key ID (if None, uses environment variables)
            aws_secret_access_key: AWS secret access key (if None, uses environment variables)
            region_name: AWS region name (if None, uses environment variables)
            timeout: Connect and read timeout in seconds for every S3 call
            public_base_url: URL prefix for stored objects (defaults to the bucket's virtual-hosted URL)
            s3_client: Preconfigured client (used by tests)
        """
        self.bucket_name = bucket_name
        self.region_name = region_name or "us-east-1"
        self.public_base_url = (
            public_base_url or f"https://{bucket_name}.s3.{self.region_name}.amazonaws.com"
        ).rstrip("/")

        # If credentials are not provided, boto3 will look for them in environment variables
        # No retries: a failed upload fails the request and is compensated
        self.s3_client = s3_client or boto3.client(
            's3',
            aws_access_key_id=aws_access_key_id or None,
            aws_secret_access_key=aws_secret_access_key or None,
            region_name=self.region_name,
            config=Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )

    def upload(self, data: bytes, key: str, content_type: str = "image/png") -> str:
        """
        Save an asset to S3.

        Returns:
            Public URL of the object
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailureError(f"Failed to upload asset {key}: {e}") from e

        return f"{self.public_base_url}/{key}"
