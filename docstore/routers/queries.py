"""
Cross-document endpoints: composite merge and key-set algebra.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from docstore.services.document_store import DocumentStore, get_store

router = APIRouter(tags=["queries"])


@router.get("/merge")
async def get_merge(store: DocumentStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Merge every document into one composite snapshot.

    The snapshot is also written to the configured snapshot file. It is a
    best-effort view: documents changed while the merge runs may or may not
    be included, and unreadable documents are left out.
    """
    return await store.merge_all()


@router.get("/union")
async def get_union(
    file_a: str = Query(..., alias="fileA", min_length=1),
    file_b: str = Query(..., alias="fileB", min_length=1),
    store: DocumentStore = Depends(get_store)
) -> List[str]:
    """All keys of both documents, without duplicates."""
    return await store.union(file_a, file_b)


@router.get("/intersect")
async def get_intersect(
    file_a: str = Query(..., alias="fileA", min_length=1),
    file_b: str = Query(..., alias="fileB", min_length=1),
    store: DocumentStore = Depends(get_store)
) -> List[str]:
    """
    Keys present with a truthy value in both documents.

    A key whose value is falsy (null, false, 0, empty) in either document
    is excluded.
    """
    return await store.intersect(file_a, file_b)


@router.get("/difference")
async def get_difference(
    file_a: str = Query(..., alias="fileA", min_length=1),
    file_b: str = Query(..., alias="fileB", min_length=1),
    store: DocumentStore = Depends(get_store)
) -> List[str]:
    """Keys truthy in only one of the documents, `fileA`'s keys first."""
    return await store.difference(file_a, file_b)
