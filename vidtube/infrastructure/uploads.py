"""Upload Spooling — writes a multipart upload to a temp file and hands it to blob storage.

Invariants:
    - The temp file is removed after every store attempt, success or failure
    - A store that returns None or raises surfaces as BlobStorageError (nothing persisted
      by the caller after that)
    - Temp names never reuse the client filename verbatim (only its suffix)
    - A spool that fails partway removes its partial temp file
    - Disk writes run in the threadpool; the event loop only awaits the upload stream
"""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from vidtube.core.errors import BlobStorageError
from vidtube.core.repository_protocols import BlobStorage, StoredBlob

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


async def spool_upload(upload: UploadFile, tmp_dir: str | Path) -> Path:
    """Copy the upload into tmp_dir and return the local path."""
    directory = Path(tmp_dir)
    directory.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix
    local_path = directory / f"{uuid.uuid4().hex}{suffix}"
    try:
        with local_path.open("wb") as out:
            while chunk := await upload.read(_CHUNK_SIZE):
                await run_in_threadpool(out.write, chunk)
    except BaseException:
        local_path.unlink(missing_ok=True)
        raise
    return local_path


async def store_upload(
    storage: BlobStorage, upload: UploadFile, hint_name: str, tmp_dir: str | Path,
) -> StoredBlob:
    local_path = await spool_upload(upload, tmp_dir)
    try:
        blob = await storage.store(local_path, hint_name)
    except Exception as e:
        logger.error(f"Blob store raised for {hint_name}: {e}", exc_info=True)
        raise BlobStorageError(hint_name) from e
    finally:
        local_path.unlink(missing_ok=True)
    if blob is None:
        raise BlobStorageError(hint_name)
    return blob
