"""
Filesystem storage handle for documents, the audit log and the merge snapshot.

All blocking file I/O is dispatched to a worker thread so that callers only
suspend at storage boundaries.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from docstore.config import settings
from docstore.errors import InvalidDocumentId

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".json"
LOG_HEADER = "=== Beginning of Log ===\n"

PathLike = Union[str, Path]


class Storage:
    """Async handle over the directory that holds one JSON file per document."""

    def __init__(
        self,
        data_dir: Optional[PathLike] = None,
        log_path: Optional[PathLike] = None,
        snapshot_path: Optional[PathLike] = None
    ):
        self.data_dir = Path(data_dir if data_dir is not None else settings.data_dir)
        self.log_path = Path(log_path if log_path is not None else settings.log_path)
        self.snapshot_path = Path(
            snapshot_path if snapshot_path is not None else settings.snapshot_path
        )
        self._lock = asyncio.Lock()
        self._connected = False

    async def connect(self) -> None:
        """Create the data directory and the log file if they are missing."""
        async with self._lock:
            if self._connected:
                return

            logger.info(f"Preparing document storage at {self.data_dir}...")
            await asyncio.to_thread(self._prepare)
            self._connected = True
            logger.info("Document storage ready")

    def _prepare(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.log_path.exists():
            self.log_path.write_text(LOG_HEADER, encoding="utf-8")

    # ------------------------------------------------------------------
    # Document IDs
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_id(doc_id: str) -> str:
        """
        Strip one trailing storage suffix and validate the remaining name.

        Callers normalize once; the storage primitives below take the bare
        name and never strip again.

        Raises:
            InvalidDocumentId: If the name is empty, a relative path marker,
                or contains a path separator or NUL byte.
        """
        name = doc_id[:-len(DOCUMENT_SUFFIX)] if doc_id.endswith(DOCUMENT_SUFFIX) else doc_id
        if not Storage.is_valid_name(name):
            raise InvalidDocumentId(doc_id)
        return name

    @staticmethod
    def is_valid_name(name: str) -> bool:
        return name not in ("", ".", "..") and not any(c in name for c in ("/", "\\", "\x00"))

    def document_path(self, name: str) -> Path:
        """Physical location of the document with bare name `name`."""
        if not self.is_valid_name(name):
            raise InvalidDocumentId(name)
        return self.data_dir / f"{name}{DOCUMENT_SUFFIX}"

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def exists(self, name: str) -> bool:
        path = self.document_path(name)
        return await asyncio.to_thread(path.exists)

    async def read_document(self, name: str) -> str:
        path = self.document_path(name)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def write_document(self, name: str, text: str) -> None:
        path = self.document_path(name)
        await asyncio.to_thread(path.write_text, text, encoding="utf-8")

    async def delete_document(self, name: str) -> None:
        path = self.document_path(name)
        await asyncio.to_thread(path.unlink)

    async def list_documents(self) -> List[str]:
        """Return the IDs of every document file, sorted by name."""
        return await asyncio.to_thread(self._list_documents)

    def _list_documents(self) -> List[str]:
        snapshot = self.snapshot_path.resolve()
        return sorted(
            path.name[:-len(DOCUMENT_SUFFIX)]
            for path in self.data_dir.iterdir()
            if path.suffix == DOCUMENT_SUFFIX
            and path.is_file()
            and path.resolve() != snapshot
        )

    # ------------------------------------------------------------------
    # Audit log file
    # ------------------------------------------------------------------

    async def append_log(self, line: str) -> None:
        """Append one pre-rendered line with a single write."""
        await asyncio.to_thread(self._append, self.log_path, line)

    @staticmethod
    def _append(path: Path, line: str) -> None:
        with path.open("a", encoding="utf-8", newline="") as f:
            f.write(line)

    async def read_log(self) -> str:
        """Raw log text, with no newline translation."""
        if not await asyncio.to_thread(self.log_path.exists):
            return ""
        return await asyncio.to_thread(self._read_raw, self.log_path)

    @staticmethod
    def _read_raw(path: Path) -> str:
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()

    async def truncate_log(self) -> None:
        """Replace the log contents with the header line."""
        await asyncio.to_thread(self.log_path.write_text, LOG_HEADER, encoding="utf-8")

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    async def write_snapshot(self, text: str) -> None:
        await asyncio.to_thread(self.snapshot_path.write_text, text, encoding="utf-8")

    async def health_check(self) -> bool:
        """Check that the data directory exists and is writable."""
        try:
            return await asyncio.to_thread(
                lambda: self.data_dir.is_dir() and os.access(self.data_dir, os.W_OK)
            )
        except OSError as e:
            logger.error(f"Storage health check failed: {e}")
            return False


# Global storage instance
storage = Storage()


async def get_storage() -> Storage:
    """Dependency injection for storage access."""
    return storage
