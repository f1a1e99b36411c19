"""
Blob storage for uploaded files (book images).

Two backends share the same small interface:
    write(name, data), delete(name), exists(name), list_names(), url(name)

LocalBlobStore keeps files in a directory that is served publicly,
S3BlobStore keeps them under an s3://bucket/prefix.
"""
from pathlib import Path, PurePath

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from core.config import get_settings
from core.errors import StorageError
from core.logger import logger


def safe_name(name: str) -> str:
    """Reject names that would leave the storage namespace."""
    if not name or PurePath(name).name != name or name in (".", ".."):
        raise StorageError(f"Invalid blob name: {name!r}")
    return name


def parse_s3_path(s3_path: str) -> tuple[str, str]:
    """Parse S3 path into bucket and prefix"""
    if not s3_path.startswith("s3://"):
        raise ValueError("Invalid S3 path format. Must start with s3://")

    path_without_scheme = s3_path[5:]
    if not path_without_scheme or path_without_scheme.startswith("/"):
        raise ValueError("Invalid S3 path format. Bucket name is required")
    if "//" in path_without_scheme:
        raise ValueError("Invalid S3 path format. Path cannot contain double slashes")

    if "/" in path_without_scheme:
        bucket, key = path_without_scheme.split("/", 1)
    else:
        bucket, key = path_without_scheme, ""
    if key and not key.endswith("/"):
        key = f"{key}/"
    return bucket, key


class LocalBlobStore:
    """Files in a local directory, served under public_url."""

    def __init__(self, root: str | Path, public_url: str = "/storage"):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    def _path(self, name: str) -> Path:
        return self.root / safe_name(name)

    def write(self, name: str, data: bytes) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self._path(name).write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Could not store {name}: {exc}") from exc
        logger.debug("Stored blob %s (%d bytes)", name, len(data))

    def delete(self, name: str) -> None:
        try:
            self._path(name).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete {name}: {exc}") from exc
        logger.debug("Deleted blob %s", name)

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def list_names(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def url(self, name: str) -> str:
        return f"{self.public_url}/{name}"


class S3BlobStore:
    """Files under an s3://bucket/prefix."""

    def __init__(self, bucket_uri: str, s3_client=None, public_url: str | None = None):
        self.bucket, self.prefix = parse_s3_path(bucket_uri)
        self.s3_client = s3_client if s3_client is not None else boto3.client("s3")
        self.public_url = (
            public_url.rstrip("/") if public_url
            else f"https://{self.bucket}.s3.amazonaws.com/{self.prefix}".rstrip("/")
        )

    def _key(self, name: str) -> str:
        return f"{self.prefix}{safe_name(name)}"

    def _fail(self, action: str, name: str, exc: Exception) -> StorageError:
        if isinstance(exc, ClientError):
            message = exc.response["Error"]["Message"]
        elif isinstance(exc, NoCredentialsError):
            message = "AWS credentials not found. Please configure AWS credentials."
        else:
            message = str(exc)
        return StorageError(f"Could not {action} s3://{self.bucket}/{self._key(name)}: {message}")

    def write(self, name: str, data: bytes) -> None:
        try:
            self.s3_client.put_object(Bucket=self.bucket, Key=self._key(name), Body=data)
        except (ClientError, NoCredentialsError) as exc:
            raise self._fail("store", name, exc) from exc
        logger.debug("Stored blob s3://%s/%s", self.bucket, self._key(name))

    def delete(self, name: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=self._key(name))
        except (ClientError, NoCredentialsError) as exc:
            raise self._fail("delete", name, exc) from exc
        logger.debug("Deleted blob s3://%s/%s", self.bucket, self._key(name))

    def exists(self, name: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket, Key=self._key(name))
        except ClientError as exc:
            if exc.response["Error"]["Code"] in ("404", "NoSuchKey", "NotFound"):
                return False
            raise self._fail("read", name, exc) from exc
        return True

    def list_names(self) -> list[str]:
        names = []
        paginator = self.s3_client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=self.prefix, Delimiter="/"):
                for obj in page.get("Contents", []):
                    name = obj["Key"][len(self.prefix):]
                    if name:
                        names.append(name)
        except (ClientError, NoCredentialsError) as exc:
            raise self._fail("list", self.prefix or "/", exc) from exc
        return sorted(names)

    def url(self, name: str) -> str:
        return f"{self.public_url}/{name}"


def create_blob_store(settings=None):
    """Build the blob store selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "local":
        return LocalBlobStore(settings.STORAGE_ROOT, settings.STORAGE_PUBLIC_URL)
    if backend == "s3":
        public_url = settings.STORAGE_PUBLIC_URL
        # The local default makes no sense for S3, fall back to the bucket URL
        if public_url.startswith("/"):
            public_url = None
        return S3BlobStore(settings.STORAGE_BUCKET_URI, public_url=public_url)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
