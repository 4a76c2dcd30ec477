"""
S3Client - S3/MinIO operations needed by the upload stage.
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .batch_config import BatchConfig
from .errors import ConfigError


class S3Client:
    """
    Wrapper around a boto3 S3 client bound to one bucket.

    A single instance is shared by every worker thread; boto3 clients are
    safe for concurrent use.
    """

    def __init__(self, config: BatchConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.

        Args:
            config: Batch configuration (credentials, region, bucket, endpoint)
            logger: Optional logger instance
        """
        self.config = config
        self.bucket = config.bucket
        self.logger = logger or logging.getLogger(__name__)

        s3_options = {'addressing_style': 'path'} if config.endpoint else {}

        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint or None,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3=s3_options,
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout,
                retries={'total_max_attempts': 1},
                max_pool_connections=max(10, config.workers),
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    def check_bucket(self) -> None:
        """
        Confirm the bucket is reachable with the configured credentials.

        Raises:
            ConfigError: If the bucket cannot be reached
        """
        try:
            self._client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', 'unknown')
            raise ConfigError(f"Bucket {self.bucket!r} is not accessible (error {code})") from e
        except BotoCoreError as e:
            raise ConfigError(f"Could not reach store for bucket {self.bucket!r}: {e}") from e

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> dict:
        """Upload an object to the bucket, replacing any existing object with the same key."""
        return self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type
        )
