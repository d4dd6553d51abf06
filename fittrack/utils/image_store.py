# fittrack/utils/image_store.py

"""
업로드된 이미지를 저장하는 곳.

개발 환경에서는 로컬 uploads 디렉터리에, 운영 환경(STORAGE_BACKEND=s3)에서는
Amazon S3 버킷에 저장하고 공개 URL과 public id를 돌려준다.
"""

import io
import logging
import mimetypes
import os
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import (
    STORAGE_BACKEND, UPLOADS_DIR, UPLOADS_URL_PREFIX,
    AWS_BUCKET_NAME, AWS_REGION, AWS_S3_ACL,
)

logger = logging.getLogger(__name__)


class ImageStoreError(Exception):
    pass


def _extension(content_type: str) -> str:
    return mimetypes.guess_extension(content_type) or ".img"


class LocalImageStore:
    def __init__(self, root: str = UPLOADS_DIR, url_prefix: str = UPLOADS_URL_PREFIX):
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix.rstrip("/")

    def _path(self, public_id: str) -> Path:
        path = (self.root / public_id).resolve()
        if self.root not in path.parents:
            raise ImageStoreError(f"Invalid public id: {public_id}")
        return path

    def save(self, data: bytes, content_type: str, public_id: str) -> tuple[str, str]:
        public_id = f"{public_id}{_extension(content_type)}"
        path = self._path(public_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as destination:
            destination.write(data)
        return f"{self.url_prefix}/{public_id}", public_id

    def delete(self, public_id: str):
        path = self._path(public_id)
        if path.exists():
            os.remove(path)


class S3ImageStore:
    def __init__(self, bucket: str, region: str | None = None, acl: str = AWS_S3_ACL):
        if not bucket:
            raise RuntimeError("AWS_BUCKET_NAME must be set when STORAGE_BACKEND=s3.")
        kwargs = {"service_name": "s3"}
        if region:
            kwargs["region_name"] = region
        self.client = boto3.client(**kwargs)
        self.bucket = bucket
        self.acl = acl

    def save(self, data: bytes, content_type: str, public_id: str) -> tuple[str, str]:
        key = f"{public_id}{_extension(content_type)}"
        extra_args = {"ContentType": content_type}
        if self.acl:
            extra_args["ACL"] = self.acl
        try:
            self.client.upload_fileobj(io.BytesIO(data), self.bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError) as exc:
            raise ImageStoreError(f"S3 upload failed: {exc}") from exc
        return f"https://{self.bucket}.s3.amazonaws.com/{key}", key

    def delete(self, public_id: str):
        try:
            self.client.delete_object(Bucket=self.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as exc:
            raise ImageStoreError(f"S3 delete failed: {exc}") from exc


_store = None


def get_image_store():
    """FastAPI 의존성. 설정에 맞는 저장소를 한 번만 만든다."""
    global _store
    if _store is None:
        if STORAGE_BACKEND == "s3":
            _store = S3ImageStore(AWS_BUCKET_NAME, AWS_REGION)
        else:
            _store = LocalImageStore()
        logger.info("Using %s image store", STORAGE_BACKEND)
    return _store
