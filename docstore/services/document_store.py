"""
Document store service.

Owns the mapping from document IDs to JSON-object contents and offers field
CRUD, document lifecycle, bulk merge and two-document key-set algebra.

Every public operation records exactly one audit log entry describing its
outcome and then returns the result or raises the StoreError. There is no
per-document locking: concurrent read-modify-write calls on the same
document can lose updates, and merge_all reads documents without isolation.
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

from prometheus_client import Counter, Histogram

from docstore.errors import (
    AlreadyExists,
    DocumentNotFound,
    DoesNotExist,
    KeyNotFound,
    NotAnObject,
    StorageError,
    StoreError,
)
from docstore.keysets import difference_keys, intersect_keys, union_keys
from docstore.services.audit_log import AuditLog, audit_log
from docstore.storage import Storage, storage

logger = logging.getLogger(__name__)

T = TypeVar("T")

Document = Dict[str, Any]

# Prometheus metrics
operations_total = Counter(
    'docstore_operations_total',
    'Document store operations by outcome',
    ['operation', 'outcome']
)
operation_duration = Histogram(
    'docstore_operation_seconds',
    'Document store operation duration',
    ['operation']
)

# Seed data restored by reset()
SAMPLE_DOCUMENTS: Dict[str, Document] = {
    "andrew": {
        "firstname": "Andrew",
        "lastname": "Maney",
        "email": "amaney@talentpath.com",
    },
    "scott": {
        "firstname": "Scott",
        "lastname": "Roberts",
        "email": "sroberts@talentpath.com",
        "username": "scoot",
    },
    "post": {
        "title": "Async/Await lesson",
        "description": "How to write asynchronous JavaScript",
        "date": "July 15, 2019",
    },
}


def describe_value(value: Any) -> str:
    """Render a JSON value for a log message: strings verbatim, others as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class DocumentStore:
    """
    Service for reading and mutating JSON documents.

    Handles:
    - Field get/set/remove
    - Document create/delete/read
    - Composite snapshot of all documents
    - Union/intersect/difference of two documents' keys
    """

    def __init__(self, storage: Storage, audit: AuditLog):
        self.storage = storage
        self.audit = audit

    # ========================================================================
    # Outcome recording
    # ========================================================================

    async def _run(
        self,
        operation: str,
        compute: Callable[[], Awaitable[T]],
        describe: Callable[[T], str]
    ) -> T:
        """
        Compute an operation's result, then record its outcome.

        Store errors are logged as error entries and re-raised; successful
        results are described by `describe` and returned.
        """
        start = time.perf_counter()
        try:
            result = await compute()
        except StoreError as exc:
            operations_total.labels(operation=operation, outcome="error").inc()
            await self.audit.append(exc.message, is_error=True)
            raise
        finally:
            operation_duration.labels(operation=operation).observe(
                time.perf_counter() - start
            )

        operations_total.labels(operation=operation, outcome="success").inc()
        await self.audit.append(describe(result))
        return result

    # ========================================================================
    # Storage helpers
    # ========================================================================

    async def _load(self, doc_id: str) -> Document:
        """
        Read and parse a document.

        Raises:
            InvalidDocumentId: Malformed ID
            DocumentNotFound: Storage absent or unreadable
            NotAnObject: Contents are not a JSON object
        """
        name = self.storage.normalize_id(doc_id)
        return await self._read(name)

    async def _read(self, name: str) -> Document:
        """Read and parse the document with bare, already normalized `name`."""
        try:
            text = await self.storage.read_document(name)
        except UnicodeDecodeError as exc:
            raise NotAnObject(name) from exc
        except OSError as exc:
            logger.debug(f"Read of '{name}' failed: {exc}")
            raise DocumentNotFound(name) from exc

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise NotAnObject(name) from exc

        if not isinstance(data, dict):
            raise NotAnObject(name)
        return data

    async def _save(self, name: str, data: Document) -> None:
        """Rewrite a document in full."""
        try:
            text = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot serialize contents of '{name}': {exc}") from exc

        try:
            await self.storage.write_document(name, text)
        except OSError as exc:
            raise StorageError(f"Problem writing to '{name}'") from exc

    async def _load_pair(self, doc_a: str, doc_b: str) -> Tuple[Document, Document]:
        """Read two documents concurrently; the first failure (A before B) wins."""
        results = await asyncio.gather(
            self._load(doc_a), self._load(doc_b), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results[0], results[1]

    # ========================================================================
    # Field operations
    # ========================================================================

    async def get(self, doc_id: str, key: str) -> Any:
        """
        Return the value stored under `key`.

        Raises:
            KeyNotFound: If the key is absent
            NotAnObject: If the document is not a JSON object
            DocumentNotFound: If the document is missing or unreadable
        """
        async def compute() -> Any:
            data = await self._load(doc_id)
            if key not in data:
                raise KeyNotFound(self.storage.normalize_id(doc_id), key)
            return data[key]

        return await self._run("get", compute, describe_value)

    async def set(self, doc_id: str, key: str, value: Any) -> Document:
        """
        Insert or overwrite `key` and persist the whole document.

        Returns:
            The rewritten document contents
        """
        async def compute() -> Document:
            data = await self._load(doc_id)
            data[key] = value
            await self._save(self.storage.normalize_id(doc_id), data)
            return data

        return await self._run(
            "set",
            compute,
            lambda _: (
                f"{self.storage.normalize_id(doc_id)} successfully set "
                f"{key} to be {describe_value(value)}"
            )
        )

    async def remove(self, doc_id: str, key: str) -> Document:
        """
        Delete `key` if present and persist the whole document.

        Removing an absent key is a successful no-op.
        """
        async def compute() -> Document:
            data = await self._load(doc_id)
            data.pop(key, None)
            await self._save(self.storage.normalize_id(doc_id), data)
            return data

        return await self._run(
            "remove",
            compute,
            lambda _: f"{self.storage.normalize_id(doc_id)} successfully removed {key}"
        )

    # ========================================================================
    # Document lifecycle
    # ========================================================================

    async def create_document(
        self,
        doc_id: str,
        contents: Optional[Document] = None
    ) -> Document:
        """
        Create a document holding `contents` (an empty object by default).

        The existence check and the write are separate steps; two concurrent
        creators of the same ID can both succeed, the last write winning.

        Raises:
            AlreadyExists: If a document with this ID is present
            NotAnObject: If `contents` is not a dict
        """
        async def compute() -> Document:
            name = self.storage.normalize_id(doc_id)
            if await self.storage.exists(name):
                raise AlreadyExists(name)
            if contents is not None and not isinstance(contents, dict):
                raise NotAnObject(name)
            data = dict(contents) if contents else {}
            await self._save(name, data)
            return data

        return await self._run(
            "create",
            compute,
            lambda _: f"Successfully created '{self.storage.normalize_id(doc_id)}'"
        )

    async def delete_document(self, doc_id: str) -> None:
        """
        Remove a document's storage.

        Raises:
            DoesNotExist: If there is no document with this ID
        """
        async def compute() -> None:
            name = self.storage.normalize_id(doc_id)
            if not await self.storage.exists(name):
                raise DoesNotExist(name)
            try:
                await self.storage.delete_document(name)
            except FileNotFoundError as exc:
                raise DoesNotExist(name) from exc
            except OSError as exc:
                raise StorageError(f"Problem deleting '{name}'") from exc

        return await self._run(
            "delete",
            compute,
            lambda _: f"Successfully deleted '{self.storage.normalize_id(doc_id)}'"
        )

    async def get_document(self, doc_id: str) -> Document:
        """Return a document's full contents."""
        return await self._run("get_document", lambda: self._load(doc_id), json.dumps)

    async def list_documents(self) -> List[str]:
        """Return the sorted IDs of all documents."""
        async def compute() -> List[str]:
            try:
                return await self.storage.list_documents()
            except OSError as exc:
                raise StorageError("Failed to list documents") from exc

        return await self._run(
            "list", compute, lambda names: f"Listed {len(names)} documents"
        )

    # ========================================================================
    # Aggregation
    # ========================================================================

    async def merge_all(self) -> Dict[str, Document]:
        """
        Build the composite snapshot of every document and persist it.

        Enumeration, reads and the snapshot write are separate steps with no
        isolation, so documents changed concurrently may or may not be
        reflected. Documents that fail to read or parse are omitted.

        Returns:
            Mapping of document ID to contents
        """
        omitted: List[str] = []

        async def compute() -> Dict[str, Document]:
            try:
                names = await self.storage.list_documents()
            except OSError as exc:
                raise StorageError("Failed to merge data") from exc

            results = await asyncio.gather(
                *(self._read(name) for name in names), return_exceptions=True
            )

            snapshot: Dict[str, Document] = {}
            for name, result in zip(names, results):
                if isinstance(result, StoreError):
                    logger.warning(f"Omitting '{name}' from merge: {result.message}")
                    omitted.append(name)
                elif isinstance(result, BaseException):
                    raise result
                else:
                    snapshot[name] = result

            try:
                await self.storage.write_snapshot(json.dumps(snapshot))
            except OSError as exc:
                raise StorageError(
                    f"Failed to write to {self.storage.snapshot_path}"
                ) from exc
            return snapshot

        def describe(snapshot: Dict[str, Document]) -> str:
            message = (
                f"Successfully merged {len(snapshot)} files and added to "
                f"{self.storage.snapshot_path}"
            )
            if omitted:
                message += f" (failed to read: {', '.join(omitted)})"
            return message

        return await self._run("merge", compute, describe)

    # ========================================================================
    # Key-set algebra
    # ========================================================================

    async def _compare(
        self,
        operation: str,
        doc_a: str,
        doc_b: str,
        combine: Callable[[Document, Document], List[str]]
    ) -> List[str]:
        async def compute() -> List[str]:
            a, b = await self._load_pair(doc_a, doc_b)
            return combine(a, b)

        return await self._run(operation, compute, json.dumps)

    async def union(self, doc_a: str, doc_b: str) -> List[str]:
        """All keys of both documents, without duplicates."""
        return await self._compare("union", doc_a, doc_b, union_keys)

    async def intersect(self, doc_a: str, doc_b: str) -> List[str]:
        """Keys of A whose values are truthy in both documents."""
        return await self._compare("intersect", doc_a, doc_b, intersect_keys)

    async def difference(self, doc_a: str, doc_b: str) -> List[str]:
        """Keys truthy in only one document, A's first."""
        return await self._compare("difference", doc_a, doc_b, difference_keys)

    # ========================================================================
    # Demo data
    # ========================================================================

    async def reset(self) -> None:
        """
        Re-seed the sample documents and truncate the audit log.

        Documents other than the samples are left untouched. For demo and
        test environments only.
        """
        await self.storage.connect()
        await asyncio.gather(*(
            self.storage.write_document(name, json.dumps(contents))
            for name, contents in SAMPLE_DOCUMENTS.items()
        ))
        await self.audit.reset()
        logger.info(f"Re-seeded sample documents: {', '.join(SAMPLE_DOCUMENTS)}")


# Global document store instance
document_store = DocumentStore(storage, audit_log)


async def get_store() -> DocumentStore:
    """Dependency injection for document store access."""
    return document_store
