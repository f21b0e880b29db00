"""
Test fixtures and configuration for pytest.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from docstore.services.audit_log import AuditLog
from docstore.services.document_store import SAMPLE_DOCUMENTS, DocumentStore, get_store
from docstore.storage import LOG_HEADER, Storage, get_storage


def write_document(storage: Storage, name: str, contents: Any) -> Path:
    """Write raw contents straight to a document file, bypassing the store."""
    path = storage.data_dir / f"{name}.json"
    if isinstance(contents, str):
        path.write_text(contents, encoding="utf-8")
    else:
        path.write_text(json.dumps(contents), encoding="utf-8")
    return path


def read_document(storage: Storage, name: str) -> Dict[str, Any]:
    """Read a document file straight from disk."""
    return json.loads((storage.data_dir / f"{name}.json").read_text(encoding="utf-8"))


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    """Storage handle rooted in a temporary directory, already prepared."""
    handle = Storage(
        data_dir=tmp_path / "db-files",
        log_path=tmp_path / "db-files" / "log.txt",
        snapshot_path=tmp_path / "mergedData.json",
    )
    handle.data_dir.mkdir(parents=True)
    handle.log_path.write_text(LOG_HEADER, encoding="utf-8")
    return handle


@pytest.fixture
def audit(storage: Storage) -> AuditLog:
    """Audit log bound to the temporary storage."""
    return AuditLog(storage)


@pytest.fixture
def store(storage: Storage, audit: AuditLog) -> DocumentStore:
    """Empty document store."""
    return DocumentStore(storage, audit)


@pytest.fixture
def seeded_storage(storage: Storage) -> Storage:
    """Temporary storage holding the sample documents."""
    for name, contents in SAMPLE_DOCUMENTS.items():
        write_document(storage, name, contents)
    return storage


@pytest.fixture
def seeded_store(seeded_storage: Storage, audit: AuditLog) -> DocumentStore:
    """Document store holding andrew, scott and post."""
    return DocumentStore(seeded_storage, audit)


@pytest_asyncio.fixture
async def connected_store(tmp_path: Path) -> DocumentStore:
    """Store whose storage was prepared through Storage.connect()."""
    handle = Storage(
        data_dir=tmp_path / "fresh" / "db-files",
        log_path=tmp_path / "fresh" / "log.txt",
        snapshot_path=tmp_path / "fresh" / "merged.json",
    )
    await handle.connect()
    return DocumentStore(handle, AuditLog(handle))


@pytest.fixture
def client(seeded_store: DocumentStore):
    """HTTP client whose store dependency points at the seeded temporary store."""
    from docstore.main import app

    app.dependency_overrides[get_store] = lambda: seeded_store
    app.dependency_overrides[get_storage] = lambda: seeded_store.storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
