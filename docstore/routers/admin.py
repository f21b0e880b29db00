"""
Audit log inspection and demo data reset.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from docstore.config import settings
from docstore.models import LogEntryModel, LogListing, OperationResult
from docstore.services.document_store import DocumentStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/log", response_model=LogListing)
async def read_log(store: DocumentStore = Depends(get_store)):
    """
    Read the audit log.

    Entries are returned in append order; the header line is omitted.
    """
    entries = await store.audit.entries()
    return LogListing(
        count=len(entries),
        entries=[
            LogEntryModel(
                message=entry.message,
                is_error=entry.is_error,
                timestamp=entry.timestamp
            )
            for entry in entries
        ]
    )


@router.post("/admin/reset", response_model=OperationResult)
async def reset_store(store: DocumentStore = Depends(get_store)):
    """
    Re-seed the sample documents and truncate the audit log.

    Only available when `ENABLE_RESET` is set; intended for demo and test
    environments.
    """
    if not settings.enable_reset:
        raise HTTPException(status_code=404, detail="Not Found")

    logger.warning("Resetting document store to sample data")
    await store.reset()
    return OperationResult(status="ok", message="Database reset")
