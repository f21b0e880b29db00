"""
Database Reset Script

Re-seeds the sample documents (andrew, scott, post) and truncates the audit
log to its header line. Documents added since are left in place.

Intended for demo and test environments.
"""

import asyncio
import json

from docstore.services.audit_log import AuditLog
from docstore.services.document_store import SAMPLE_DOCUMENTS, DocumentStore
from docstore.storage import Storage


async def reset(
    data_dir: str = None,
    log_path: str = None,
    verbose: bool = False
) -> None:
    """
    Reset the store at the given location.

    Args:
        data_dir: Documents directory (settings default if omitted)
        log_path: Audit log file (settings default if omitted)
        verbose: Print the seeded documents
    """
    storage = Storage(data_dir=data_dir, log_path=log_path)
    store = DocumentStore(storage, AuditLog(storage))

    await store.reset()

    print(f"Reset document store at {storage.data_dir}")
    if verbose:
        for name, contents in SAMPLE_DOCUMENTS.items():
            print(f"  {name}: {json.dumps(contents)}")
    print(f"Audit log truncated: {storage.log_path}")


async def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Re-seed sample documents and truncate the audit log"
    )
    parser.add_argument(
        "--data-dir",
        help="Documents directory (defaults to DATA_DIR setting)"
    )
    parser.add_argument(
        "--log-path",
        help="Audit log file (defaults to LOG_PATH setting)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print the seeded documents"
    )

    args = parser.parse_args()

    await reset(args.data_dir, args.log_path, verbose=args.verbose)


if __name__ == "__main__":
    asyncio.run(main())
