"""
Document endpoints: field get/set/remove and document create/read/delete.

Query parameter names follow the legacy wire format (`file`, `key`,
`value`). Any StoreError raised here is turned into a 400 response by the
application's exception handler.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from docstore.models import DocumentList, OperationResult
from docstore.services.document_store import DocumentStore, get_store

router = APIRouter(tags=["documents"])


@router.get("/get")
async def get_key_from_file(
    file: str = Query(..., min_length=1, description="Document ID"),
    key: str = Query(..., min_length=1, description="Top-level key"),
    store: DocumentStore = Depends(get_store)
) -> Any:
    """
    Get the value stored under `key` in document `file`.

    **Returns:** the JSON value itself.
    """
    return await store.get(file, key)


@router.get("/get/{file}")
async def get_file(
    file: str,
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """Get a document's full contents."""
    return await store.get_document(file)


@router.get("/documents", response_model=DocumentList)
async def list_files(store: DocumentStore = Depends(get_store)):
    """List the IDs of all documents."""
    names = await store.list_documents()
    return DocumentList(count=len(names), documents=names)


@router.patch("/set", response_model=OperationResult)
async def patch_set(
    file: str = Query(..., min_length=1),
    key: str = Query(..., min_length=1),
    value: str = Query(..., min_length=1),
    store: DocumentStore = Depends(get_store)
):
    """
    Set `key` to `value` in document `file`.

    The whole document is read, updated and rewritten.
    """
    await store.set(file, key, value)
    return OperationResult(status="ok", message="Value set")


@router.patch("/remove", response_model=OperationResult)
async def patch_remove(
    file: str = Query(..., min_length=1),
    key: str = Query(..., min_length=1),
    store: DocumentStore = Depends(get_store)
):
    """
    Remove `key` from document `file`.

    Removing a key that is not present still succeeds.
    """
    await store.remove(file, key)
    return OperationResult(status="ok", message="Value removed")


@router.post("/write/{file}", response_model=OperationResult, status_code=201)
async def post_write(
    file: str,
    contents: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store)
):
    """
    Create document `file`.

    **Request Body:** optional JSON object used as the initial contents
    (an empty object when omitted).

    Fails with 400 if the document already exists.
    """
    await store.create_document(file, contents)
    return OperationResult(status="ok", message="File written")


@router.delete("/delete/{file}", response_model=OperationResult)
async def delete_file(
    file: str,
    store: DocumentStore = Depends(get_store)
):
    """Delete document `file`. Fails with 400 if it does not exist."""
    await store.delete_document(file)
    return OperationResult(status="ok", message="File deleted")
