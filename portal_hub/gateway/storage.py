from __future__ import annotations

import io
import logging
from datetime import timedelta
from typing import Iterable

from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import S3Error
from starlette.concurrency import run_in_threadpool

from portal_hub.core.errors import GatewayError
from portal_hub.gateway.base import BlobStore

logger = logging.getLogger("portal-hub")


class MinioBlobStore(BlobStore):
    """Blob storage in one MinIO bucket; blocking client calls run in the threadpool."""

    def __init__(self, client: Minio, bucket: str):
        self._client = client
        self._bucket = bucket

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        try:
            await run_in_threadpool(
                self._client.put_object,
                bucket_name=self._bucket,
                object_name=path,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as e:
            raise GatewayError(e.message or str(e)) from e

    async def remove(self, paths: Iterable[str]) -> None:
        targets = [DeleteObject(name=p) for p in paths]

        def _remove():
            # remove_objects is lazy; errors only surface while iterating
            return list(self._client.remove_objects(bucket_name=self._bucket, delete_object_list=targets))

        try:
            errors = await run_in_threadpool(_remove)
        except S3Error as e:
            raise GatewayError(e.message or str(e)) from e
        if errors:
            for err in errors:
                logger.warning("MinIO remove failed for %s/%s: %s", self._bucket, err.name, err.message)
            raise GatewayError(errors[0].message or "Failed to remove object")

    async def download(self, path: str) -> bytes:
        def _read():
            obj = self._client.get_object(bucket_name=self._bucket, object_name=path)
            try:
                return obj.read()
            finally:
                obj.close()
                obj.release_conn()

        try:
            return await run_in_threadpool(_read)
        except S3Error as e:
            raise GatewayError(e.message or str(e)) from e

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        try:
            return await run_in_threadpool(
                self._client.presigned_get_object,
                bucket_name=self._bucket,
                object_name=path,
                expires=timedelta(seconds=ttl_seconds),
            )
        except S3Error as e:
            raise GatewayError(e.message or str(e)) from e
