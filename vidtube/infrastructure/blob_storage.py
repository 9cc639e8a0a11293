"""Local Blob Storage — copies uploaded files into the media directory served as static files.

Invariants:
    - Returned URLs are public: {media_url_prefix}/{stored_name}
    - Stored names are unique (uuid prefix): uploads never overwrite each other
    - Returns None (never raises) when the file cannot be stored; the caller owns cleanup
    - Copies run in the threadpool, never on the event loop

Design Decisions:
    - Filesystem adapter behind the BlobStorage protocol: a cloud adapter can replace it
      without touching services
    - Duration is unknown for local files (None); videos default to 0
"""

import logging
import shutil
import uuid
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from vidtube.core.repository_protocols import StoredBlob

logger = logging.getLogger(__name__)


class LocalBlobStorage:
    """BlobStorage backed by a local directory."""

    def __init__(self, media_dir: str | Path, url_prefix: str = "/media"):
        self.media_dir = Path(media_dir)
        self.url_prefix = url_prefix.rstrip("/")

    async def store(self, local_path: Path, hint_name: str) -> StoredBlob | None:
        if not local_path.exists():
            logger.warning(f"Upload source missing: {local_path}")
            return None
        stored_name = f"{uuid.uuid4().hex}-{hint_name}{local_path.suffix}"
        try:
            await run_in_threadpool(self.media_dir.mkdir, parents=True, exist_ok=True)
            await run_in_threadpool(
                shutil.copyfile, local_path, self.media_dir / stored_name,
            )
        except OSError as e:
            logger.error(f"Failed to store {hint_name}: {e}")
            return None
        logger.info(f"Stored {hint_name} as {stored_name}")
        return StoredBlob(url=f"{self.url_prefix}/{stored_name}")
