"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Blob storage accessed through a Protocol; the concrete adapter is injected
      by the API layer and replaced by an in-memory fake in tests

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO (disk, network)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class StoredBlob:
    """Public location of a stored file (+ media duration when the store knows it)."""
    url: str
    duration: float | None = None


class BlobStorage(Protocol):
    """Contract for media storage — implemented by infrastructure/blob_storage.py."""
    async def store(self, local_path: Path, hint_name: str) -> StoredBlob | None: ...
