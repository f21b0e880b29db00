"""
Document Store Service
======================

A persistent document store exposing:
- Named JSON objects, one file per document
- Field-level CRUD and document create/delete
- Composite merge and two-document key-set algebra
- A human-readable, append-only audit log of every operation
"""

__version__ = "1.0.0"
__author__ = "Document Store Team"
