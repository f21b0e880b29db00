"""
Error taxonomy for document store operations.

Every error is an expected, recoverable condition local to one operation.
The HTTP layer maps any StoreError to a 400 response carrying `message`.
"""


class StoreError(Exception):
    """Base exception for document store operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidDocumentId(StoreError):
    """Raised when a document ID is empty or contains path separators."""

    def __init__(self, doc_id: str):
        super().__init__(f"Invalid document id '{doc_id}'")
        self.doc_id = doc_id


class DocumentNotFound(StoreError):
    """Raised when a document's storage is absent or unreadable."""

    def __init__(self, doc_id: str):
        super().__init__(f"Problem reading from '{doc_id}': document not found")
        self.doc_id = doc_id


class NotAnObject(StoreError):
    """Raised when a document does not parse as a JSON object."""

    def __init__(self, doc_id: str):
        super().__init__(f"File '{doc_id}' does not contain an object")
        self.doc_id = doc_id


class KeyNotFound(StoreError):
    """Raised when a key is absent from a document."""

    def __init__(self, doc_id: str, key: str):
        super().__init__(f"Invalid key '{key}' in '{doc_id}'")
        self.doc_id = doc_id
        self.key = key


class AlreadyExists(StoreError):
    """Raised when creating a document whose ID is already taken."""

    def __init__(self, doc_id: str):
        super().__init__(f"Cannot create file, '{doc_id}' already exists")
        self.doc_id = doc_id


class DoesNotExist(StoreError):
    """Raised when deleting a document that is not there."""

    def __init__(self, doc_id: str):
        super().__init__(f"Cannot delete file, '{doc_id}' does not exist")
        self.doc_id = doc_id


class StorageError(StoreError):
    """Raised when the underlying storage rejects a write."""
    pass
