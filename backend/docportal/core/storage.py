import logging
import os
import tempfile
from typing import NamedTuple, Optional, Sequence

import cloudinary.uploader
from fastapi import Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from docportal.config.settings import settings
from docportal.core.exceptions import BadRequestError, PayloadTooLargeError, UploadFailedError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class StoredBlob(NamedTuple):
    url: str
    public_id: str


class BlobStorageError(Exception):
    pass


class CloudinaryStorage:
    """Relays staged files to Cloudinary.

    Credentials are passed on every call instead of through the SDK's global
    ``cloudinary.config`` so several clients can coexist in one process.
    The deletion handle returned in ``StoredBlob.public_id`` is
    ``"<resource_type>/<public_id>"`` since Cloudinary needs both to destroy
    a non-image asset.
    """

    def __init__(self, cloud_name: Optional[str], api_key: Optional[str], api_secret: Optional[str]):
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }

    @property
    def configured(self) -> bool:
        return all(self._credentials.values())

    async def upload(self, path: str, folder: str) -> StoredBlob:
        if not self.configured:
            raise BlobStorageError("Blob storage credentials are not configured")
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                path,
                folder=folder,
                resource_type="auto",
                **self._credentials,
            )
        except Exception as e:
            logger.error(f"Cloudinary upload of {path} failed: {e}", exc_info=True)
            raise BlobStorageError(str(e)) from e
        handle = f"{result.get('resource_type', 'image')}/{result['public_id']}"
        logger.info(f"Uploaded {path} to Cloudinary as {handle}")
        return StoredBlob(url=result["secure_url"], public_id=handle)

    async def delete(self, public_id: str) -> None:
        resource_type, _, asset_id = public_id.partition("/")
        if not asset_id:
            resource_type, asset_id = "image", public_id
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.destroy,
                asset_id,
                resource_type=resource_type,
                invalidate=True,
                **self._credentials,
            )
        except Exception as e:
            raise BlobStorageError(str(e)) from e
        if result.get("result") not in ("ok", "not found"):
            raise BlobStorageError(f"Unexpected destroy result: {result}")


def get_blob_storage(request: Request):
    """FastAPI dependency returning the blob storage client built at startup."""
    return request.app.state.blob_storage


def _check_content_type(upload: UploadFile, allowed_types: Sequence[str], allowed_prefixes: Sequence[str]) -> None:
    content_type = (upload.content_type or "").lower()
    if content_type in allowed_types or any(content_type.startswith(p) for p in allowed_prefixes):
        return
    raise BadRequestError(f"File type {content_type or 'unknown'} is not allowed")


def discard_staged_file(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove staged upload {path}: {e}")


async def stage_upload(upload: UploadFile, max_size: int) -> str:
    """Copy an incoming upload into a local temp file, enforcing ``max_size``."""
    os.makedirs(settings.upload_tmp_dir, exist_ok=True)
    suffix = os.path.splitext(upload.filename or "")[1]
    fd, path = tempfile.mkstemp(suffix=suffix, dir=settings.upload_tmp_dir)
    written = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_size:
                    raise PayloadTooLargeError(
                        f"File size too large. Maximum size is {max_size // (1024 * 1024)}MB."
                    )
                out.write(chunk)
    except BaseException:
        discard_staged_file(path)
        raise
    return path


async def store_upload(
    storage,
    upload: UploadFile,
    *,
    max_size: int,
    allowed_types: Sequence[str] = (),
    allowed_prefixes: Sequence[str] = (),
    folder: Optional[str] = None,
) -> StoredBlob:
    """Stage, relay and always clean up a single uploaded file."""
    _check_content_type(upload, allowed_types, allowed_prefixes)
    path = await stage_upload(upload, max_size)
    try:
        return await storage.upload(path, folder=folder or settings.cloudinary_folder)
    except BlobStorageError as e:
        raise UploadFailedError("File upload failed") from e
    finally:
        discard_staged_file(path)


async def delete_blob_quietly(storage, public_id: Optional[str]) -> None:
    """Best-effort blob removal; failures are logged and never propagated."""
    if not public_id:
        return
    try:
        await storage.delete(public_id)
    except BlobStorageError as e:
        logger.warning(f"Failed to delete blob {public_id}: {e}")
