import logging

from minio import Minio
from minio.error import S3Error

from .config import settings

logger = logging.getLogger("portal-hub")


def create_minio_client() -> Minio:
    return Minio(
        endpoint=settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE
    )


def initialize_minio_bucket(client: Minio, bucket: str = settings.MINIO_BUCKET):
    try:
        if not client.bucket_exists(bucket_name=bucket):
            client.make_bucket(bucket_name=bucket)
            logger.info(f"Bucket '{bucket}' created successfully")
        else:
            logger.info(f"Bucket '{bucket}' already exists")
    except S3Error as e:
        logger.error(f"MinIO error: {e}")
        raise RuntimeError(f"Failed to initialize MinIO bucket: {e}")
