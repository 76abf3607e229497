from datetime import timedelta
from typing import Any, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from object_gateway.core.config import Settings
from object_gateway.core.errors import StorageError
from object_gateway.models.entry import Entry

# Separator used to emulate directories on top of flat keys
DELIMITER = "/"

# Validity window of every pre-signed link handed out by the gateway
PRESIGN_TTL = timedelta(minutes=5)


def build_s3_client(settings: Settings):
    """
    Create the boto3 S3 client shared by every request.

    The client is built once at startup and only read afterwards; boto3 clients
    are safe to use from several threads at the same time.
    """
    config = Config(
        region_name=settings.S3_REGION,
        # SigV4 puts the validity window in X-Amz-Expires
        signature_version="s3v4",
        connect_timeout=settings.STORAGE_TIMEOUT,
        read_timeout=settings.STORAGE_TIMEOUT,
        # Errors go straight back to the caller
        retries={"total_max_attempts": 1},
        # S3-compatible servers (MinIO...) usually only serve path-style URLs
        s3={"addressing_style": "path" if settings.S3_ENDPOINT else "auto"},
    )
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT or None,
        aws_access_key_id=settings.S3_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY or None,
        config=config,
    )


def to_key(path: str) -> str:
    """
    Turn a request path ("/photos/a.jpg") into a storage key ("photos/a.jpg").
    """
    if path.startswith(DELIMITER):
        return path[len(DELIMITER):]
    return path


class ObjectLister:
    """
    Read-only view of one bucket.

    `client` is anything exposing boto3's `list_objects_v2` and
    `generate_presigned_url` (a real S3 client in production, a double in tests).
    """

    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    def list_by_prefix(self, path: str) -> List[Entry]:
        """
        List every object and common prefix directly under `path`.

        Follows continuation tokens until the backend reports the last page.
        Objects and directories from all pages are returned together, in the
        order the backend produced them.

        Raises:
            StorageError: If any page request fails. Entries from earlier pages are discarded.
        """
        prefix = to_key(path)
        continuation_token: Optional[str] = None
        entries: List[Entry] = []

        while True:
            kwargs = {"Bucket": self.bucket, "Prefix": prefix, "Delimiter": DELIMITER}
            if continuation_token:
                kwargs["ContinuationToken"] = continuation_token

            try:
                page = self.client.list_objects_v2(**kwargs)
            except (BotoCoreError, ClientError) as e:
                raise StorageError(str(e)) from e

            for obj in page.get("Contents", []):
                entries.append(Entry(
                    name=obj["Key"],
                    is_dir=False,
                    size=obj.get("Size", 0),
                    last_modified=obj.get("LastModified"),
                ))
            for common_prefix in page.get("CommonPrefixes", []):
                entries.append(Entry(name=common_prefix["Prefix"], is_dir=True))

            continuation_token = page.get("NextContinuationToken")
            if not page.get("IsTruncated") or not continuation_token:
                break

        return entries

    def get_temporary_link(self, key: str, ttl: timedelta = PRESIGN_TTL) -> str:
        """
        Generate a pre-signed GET URL for the exact object `key`, valid for `ttl` from now.
        The key is used as given (request paths go through `to_key` first).
        Signing happens locally; the backend is never modified.
        """
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(ttl.total_seconds()),
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e)) from e
