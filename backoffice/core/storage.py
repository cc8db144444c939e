import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request, UploadFile
import logging
import uuid
from typing import Dict, Iterable, List, Optional, Set

from backoffice.core.config import Settings

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """An uploaded file was rejected or could not be stored."""


class S3Storage:
    def __init__(self, settings: Settings):
        self.session = aioboto3.Session(
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            region_name=settings.AWS_REGION
        )
        self.bucket_name = settings.S3_BUCKET_NAME
        self.max_size = settings.MAX_UPLOAD_SIZE_BYTES

    def generate_file_key(self, filename: str, prefix: str) -> str:
        """
        Generate a unique file key for S3 storage.
        Format: {prefix}/{uuid}_{filename}
        """
        safe_name = (filename or "file").replace("/", "_").replace(" ", "_")
        return f"{prefix}/{uuid.uuid4()}_{safe_name}"

    async def upload_file(self, file_obj, file_key: str, content_type: str = None) -> bool:
        """
        Upload a file to S3.
        """
        try:
            extra_args = {'ContentType': content_type} if content_type else {}
            async with self.session.client('s3') as s3_client:
                await s3_client.upload_fileobj(
                    file_obj,
                    self.bucket_name,
                    file_key,
                    ExtraArgs=extra_args
                )
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading file to S3: {e}")
            return False

    async def delete_file(self, file_key: str) -> bool:
        """
        Delete a file from S3.
        """
        try:
            async with self.session.client('s3') as s3_client:
                await s3_client.delete_object(
                    Bucket=self.bucket_name,
                    Key=file_key
                )
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting file from S3: {e}")
            return False


def validate_upload(file: UploadFile, allowed_types: Set[str], max_size: int) -> None:
    if file.content_type not in allowed_types:
        raise UploadError(f"File type {file.content_type} is not allowed for {file.filename}")
    if file.size is not None and file.size > max_size:
        raise UploadError(f"{file.filename} exceeds the maximum size of {max_size // (1024 * 1024)}MB")


async def upload_files(
    storage: S3Storage,
    files: Dict[str, UploadFile],
    prefix: str,
    allowed_types: Set[str],
) -> Dict[str, str]:
    """
    Upload every file in ``files`` and return ``{field: key}``.

    Either all files are stored or none are: when one upload fails, the files
    already uploaded in this call are deleted before ``UploadError`` is raised.
    """
    for file in files.values():
        validate_upload(file, allowed_types, storage.max_size)

    uploaded: Dict[str, str] = {}
    for field, file in files.items():
        key = storage.generate_file_key(file.filename, f"{prefix}/{field}")
        if not await storage.upload_file(file.file, key, file.content_type):
            await delete_files(storage, uploaded.values())
            raise UploadError(f"Failed to upload {field}")
        uploaded[field] = key
        logger.info(f"Uploaded {field} to {key}")
    return uploaded


async def delete_files(storage: S3Storage, keys: Iterable[Optional[str]]) -> List[str]:
    """Delete the given keys, skipping empty ones; returns the keys that could not be deleted."""
    failed = []
    for key in keys:
        if key and not await storage.delete_file(key):
            failed.append(key)
    if failed:
        logger.warning(f"Could not delete stored files: {failed}")
    return failed


def get_storage(request: Request) -> S3Storage:
    return request.app.state.storage
