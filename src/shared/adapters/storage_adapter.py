"""
Storage adapter - profile asset uploads.

Provides:
- UploadedAsset: typed view of a multipart file already written to disk
- UploadResult: what the asset store hands back (a public URL)
- LocalStorageAdapter: copies into a directory the API serves statically
- S3StorageAdapter: uploads to an S3 bucket

Both adapters share one contract:

    result = await adapter.upload(asset)   # UploadResult, or None on failure

and both delete the temp file afterwards, whether the upload worked or not.
"""

import asyncio
import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedAsset:
    """A file received at the HTTP boundary and spooled to local disk."""

    local_path: Path
    filename: str
    content_type: Optional[str] = None


@dataclass(frozen=True)
class UploadResult:
    """Asset store response."""

    url: str
    key: str


class AssetStore(Protocol):
    """Anything that can turn an UploadedAsset into a public URL."""

    async def upload(self, asset: UploadedAsset) -> Optional[UploadResult]:
        ...


def _object_key(prefix: str, asset: UploadedAsset) -> str:
    safe_name = Path(asset.filename).name or "upload"
    key = f"{uuid.uuid4().hex}-{safe_name}"
    return f"{prefix.strip('/')}/{key}" if prefix else key


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove temp upload {path}: {e}")


class LocalStorageAdapter:
    """
    Asset store backed by a local directory.

    Files land in `root_dir` and are addressed as `base_url/<key>`; the API
    mounts that directory under /static/assets.
    """

    def __init__(self, root_dir: str, base_url: str):
        self.root_dir = Path(root_dir)
        self.base_url = base_url.rstrip("/")

    async def upload(self, asset: UploadedAsset) -> Optional[UploadResult]:
        """
        Move an uploaded file into the asset directory.

        Returns:
            UploadResult, or None if the file could not be stored
        """
        key = _object_key("", asset)
        destination = self.root_dir / key
        try:
            await asyncio.to_thread(self._copy, asset.local_path, destination)
        except OSError as e:
            logger.error(f"Failed to store asset {asset.filename}: {e}")
            return None
        finally:
            _discard(asset.local_path)

        return UploadResult(url=f"{self.base_url}/{key}", key=key)

    @staticmethod
    def _copy(source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)


class S3StorageAdapter:
    """
    Asset store backed by Amazon S3.

    Handles:
    - Uploading avatars and cover images under a key prefix
    - Building the public object URL
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "assets",
        region: str = "us-east-1",
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
    ):
        """
        Initialize S3 adapter.

        Args:
            bucket: Target bucket name
            prefix: Key prefix for all uploaded assets
            region: AWS region
            aws_access_key_id: AWS access key
            aws_secret_access_key: AWS secret key
        """
        self.bucket = bucket
        self.prefix = prefix
        self.region = region
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self._client = None

    @property
    def client(self):
        """Lazy-loaded S3 client."""
        if self._client is None:
            if self.aws_access_key_id and self.aws_secret_access_key:
                self._client = boto3.client(
                    "s3",
                    region_name=self.region,
                    aws_access_key_id=self.aws_access_key_id,
                    aws_secret_access_key=self.aws_secret_access_key,
                )
            else:
                # Use default credentials (IAM role, environment, etc.)
                self._client = boto3.client("s3", region_name=self.region)
        return self._client

    async def upload(self, asset: UploadedAsset) -> Optional[UploadResult]:
        """
        Upload a file to the bucket.

        Returns:
            UploadResult with the object URL, or None if S3 rejected the upload
        """
        key = _object_key(self.prefix, asset)
        extra_args = {"ContentType": asset.content_type} if asset.content_type else None
        try:
            await asyncio.to_thread(
                self.client.upload_file,
                str(asset.local_path),
                self.bucket,
                key,
                ExtraArgs=extra_args,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {asset.filename} to s3://{self.bucket}: {e}")
            return None
        finally:
            _discard(asset.local_path)

        url = f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
        logger.info(f"Uploaded asset to {url}")
        return UploadResult(url=url, key=key)


def build_storage_adapter(app_settings: Settings) -> AssetStore:
    """
    Build the asset store selected by ASSET_STORE_BACKEND.

    Raises:
        ValueError: For an unknown backend name
    """
    backend = app_settings.ASSET_STORE_BACKEND.lower()
    if backend == "local":
        return LocalStorageAdapter(app_settings.LOCAL_ASSET_DIR, app_settings.LOCAL_ASSET_BASE_URL)
    if backend == "s3":
        return S3StorageAdapter(
            bucket=app_settings.S3_ASSET_BUCKET,
            prefix=app_settings.S3_ASSET_PREFIX,
            region=app_settings.AWS_REGION,
            aws_access_key_id=app_settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=app_settings.AWS_SECRET_ACCESS_KEY,
        )
    raise ValueError(f"Unknown ASSET_STORE_BACKEND: {app_settings.ASSET_STORE_BACKEND}")
