"""Cloud Firestore document transport.

Maps declarative requests onto document CRUD:

- GET reads a document: 200 with its fields as JSON, or 404 with an
  empty payload when it does not exist
- PUT and POST replace the document, PATCH merges into it; both answer
  200 echoing the written body
- DELETE removes the document and answers 204 with an empty payload

Requires google-cloud-firestore: pip install callwire[firestore]
"""

import inspect
import json
import logging
from typing import Any, Mapping

from pydantic_core import to_json

from .config import CallwireConfig
from .exceptions import InvalidDocumentError, MissingBodyError, PathValidationError
from .response import HTTPMethod, Response

logger = logging.getLogger("callwire")

# Lazy import check for google-cloud-firestore
try:
    from google.cloud import firestore

    FIRESTORE_AVAILABLE = True
except ImportError:
    FIRESTORE_AVAILABLE = False
    firestore = None  # type: ignore

PATH_SEPARATOR = "/"
SUCCESS_STATUS_CODE = 200
NO_CONTENT_STATUS_CODE = 204
NOT_FOUND_STATUS_CODE = 404


class FirestoreTransport:
    """Firestore-backed implementation of the RequestTransport protocol.

    Usage:
        transport = FirestoreTransport(config, root_path="tenants/acme")
        response = await transport.request("users/42", HTTPMethod.GET)
    """

    def __init__(
        self,
        config: CallwireConfig | None = None,
        client: "firestore.AsyncClient | None" = None,
        root_path: str | None = None,
    ):
        """Initialize Firestore transport.

        Args:
            config: Callwire configuration. If None, loads from environment.
            client: Optional existing AsyncClient (for testing or advanced use).
            root_path: Prefix for every document path. Defaults to
                config.firestore_root_path.

        Raises:
            ImportError: If no client is given and google-cloud-firestore
                is not installed.
        """
        self.config = config or CallwireConfig()
        self.root_path = (
            root_path if root_path is not None else self.config.firestore_root_path
        ).strip(PATH_SEPARATOR)

        if client is None:
            if not FIRESTORE_AVAILABLE:
                raise ImportError(
                    "google-cloud-firestore is required for Firestore transport. "
                    "Install with: pip install callwire[firestore]"
                )
            kwargs: dict[str, Any] = {"project": self.config.firestore_project}
            if self.config.firestore_database:
                kwargs["database"] = self.config.firestore_database
            client = firestore.AsyncClient(**kwargs)
        self._db = client

    async def close(self) -> None:
        """Close the underlying gRPC channel."""
        result = self._db.close()
        if inspect.isawaitable(result):
            await result

    async def __aenter__(self) -> "FirestoreTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def resolve_path(self, path: str) -> str:
        """Join ``path`` to the root path and check it addresses a document.

        Raises:
            PathValidationError: If the path has an odd or zero number of
                segments
        """
        full_path = f"{self.root_path}/{path}" if self.root_path else path
        segments = [segment for segment in full_path.split(PATH_SEPARATOR) if segment]
        if not segments or len(segments) % 2 != 0:
            raise PathValidationError(full_path)
        return PATH_SEPARATOR.join(segments)

    async def request(
        self,
        path: str,
        method: HTTPMethod,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Perform the document operation for ``method``.

        Headers are accepted for protocol compatibility and ignored.

        Raises:
            PathValidationError: If the path does not address a document
            MissingBodyError: If a write has no body
            InvalidDocumentError: If a write body is not a JSON object
        """
        doc_ref = self._db.document(self.resolve_path(path))

        if method is HTTPMethod.GET:
            return await self._get(doc_ref)
        if method in (HTTPMethod.PUT, HTTPMethod.POST):
            return await self._write(doc_ref, body, merge=False)
        if method is HTTPMethod.PATCH:
            return await self._write(doc_ref, body, merge=True)
        return await self._delete(doc_ref)

    async def _get(self, doc_ref) -> Response:
        snapshot = await doc_ref.get()
        if not snapshot.exists:
            return Response(payload=b"", status_code=NOT_FOUND_STATUS_CODE)
        return Response(payload=to_json(snapshot.to_dict() or {}), status_code=SUCCESS_STATUS_CODE)

    async def _write(self, doc_ref, body: bytes | None, merge: bool) -> Response:
        if body is None:
            raise MissingBodyError()
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidDocumentError(f"Document data is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidDocumentError()

        await doc_ref.set(data, merge=merge)
        logger.debug("Wrote document %s (merge=%s)", doc_ref.path, merge)
        return Response(payload=body, status_code=SUCCESS_STATUS_CODE)

    async def _delete(self, doc_ref) -> Response:
        await doc_ref.delete()
        return Response(payload=b"", status_code=NO_CONTENT_STATUS_CODE)
