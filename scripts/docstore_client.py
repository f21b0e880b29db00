"""
Sample Document Store Client

This script demonstrates how to call the document store HTTP API.
"""

import json
import sys
from typing import Any, Dict, List, Optional

import httpx


class DocumentStoreClient:
    """
    Client for the Document Store Service HTTP API.
    """

    def __init__(self, api_url: str, timeout: float = 30.0):
        """
        Initialize the client.

        Args:
            api_url: Base URL of the document store API
            timeout: Request timeout in seconds
        """
        self.api_url = api_url.rstrip('/')
        self.client = httpx.Client(base_url=self.api_url, timeout=timeout)

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self.client.request(method, path, **kwargs)
        response.raise_for_status()
        return response

    def get(self, file: str, key: str) -> Any:
        """Get the value of `key` in document `file`."""
        return self._send("GET", "/get", params={"file": file, "key": key}).json()

    def get_document(self, file: str) -> Dict[str, Any]:
        """Get a whole document."""
        return self._send("GET", f"/get/{file}").json()

    def set(self, file: str, key: str, value: str) -> dict:
        """Set `key` to `value` in document `file`."""
        return self._send(
            "PATCH", "/set", params={"file": file, "key": key, "value": value}
        ).json()

    def remove(self, file: str, key: str) -> dict:
        """Remove `key` from document `file`."""
        return self._send("PATCH", "/remove", params={"file": file, "key": key}).json()

    def create(self, file: str, contents: Optional[Dict[str, Any]] = None) -> dict:
        """Create document `file`, optionally with initial contents."""
        return self._send("POST", f"/write/{file}", json=contents).json()

    def delete(self, file: str) -> dict:
        """Delete document `file`."""
        return self._send("DELETE", f"/delete/{file}").json()

    def merge(self) -> Dict[str, Any]:
        """Composite snapshot of every document."""
        return self._send("GET", "/merge").json()

    def union(self, file_a: str, file_b: str) -> List[str]:
        return self._send("GET", "/union", params={"fileA": file_a, "fileB": file_b}).json()

    def intersect(self, file_a: str, file_b: str) -> List[str]:
        return self._send("GET", "/intersect", params={"fileA": file_a, "fileB": file_b}).json()

    def difference(self, file_a: str, file_b: str) -> List[str]:
        return self._send("GET", "/difference", params={"fileA": file_a, "fileB": file_b}).json()

    def log(self) -> List[dict]:
        """Audit log entries in append order."""
        return self._send("GET", "/log").json()["entries"]

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# Example usage
if __name__ == "__main__":
    api_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:4196"

    print("=== Document Store Client Demo ===\n")

    with DocumentStoreClient(api_url) as client:
        print("scott.firstname:", client.get("scott", "firstname"))
        print("union(scott, andrew):", client.union("scott", "andrew"))
        print("intersect(scott, andrew):", client.intersect("scott", "andrew"))
        print("difference(scott, andrew):", client.difference("scott", "andrew"))
        print("\nMerged snapshot:")
        print(json.dumps(client.merge(), indent=2))

        print("\nLast log entries:")
        for entry in client.log()[-5:]:
            prefix = "ERROR: " if entry["is_error"] else ""
            print(f"  {prefix}{entry['message']} | {entry['timestamp']}")
