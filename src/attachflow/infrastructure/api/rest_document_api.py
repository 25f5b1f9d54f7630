"""REST Document API - Implementation of DocumentApiPort over HTTP using httpx.

Endpoints (paths configurable via Settings):
- GET    {base}/LR/master-data/document-types        -> [DocumentType]
- GET    {base}/LR/entries/{owner_id}/documents      -> [Document]
- POST   {base}/LR/entries/{owner_id}/documents      multipart {typeId, file} -> Document
- DELETE {base}/LR/documents/{document_id}           -> no content

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
import mimetypes
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from ...config import Settings, get_settings
from ...domain.documents.errors import TransportError
from ...domain.documents.models import Document, DocumentType, UploadCandidate
from ...domain.documents.ports import DocumentApiPort
from .schemas import DocumentSchema, DocumentTypeSchema

logger = logging.getLogger(__name__)


_DOCUMENT_TYPE_LIST = TypeAdapter(List[DocumentTypeSchema])
_DOCUMENT_LIST = TypeAdapter(List[DocumentSchema])


def friendly_http_message(status_code: int, url: str) -> str:
    """Short, user-facing description of an HTTP failure"""
    if status_code == 401:
        return "Unauthorized (401): sign in again"
    if status_code == 403:
        return "Forbidden (403)"
    if status_code == 404:
        return f"Not found (404): {url}"
    if status_code == 413:
        return "Payload too large (413)"
    if status_code >= 500:
        return f"Server error ({status_code})"
    return f"HTTP error {status_code}"


class RestDocumentApi(DocumentApiPort):
    """Document backend adapter using httpx.AsyncClient.

    Every failure (connection, timeout, non-2xx, malformed body) is
    raised as TransportError. No retries are attempted.

    Example:
        async with RestDocumentApi(get_settings()) as api:
            types = await api.list_document_types()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize REST adapter.

        Args:
            settings: Backend URL, paths, token, timeout (defaults to get_settings())
            client: Pre-built client (tests inject one with a MockTransport)
        """
        self.settings = settings or get_settings()

        headers = {"Accept": "application/json"}
        if self.settings.API_TOKEN:
            headers["Authorization"] = f"Bearer {self.settings.API_TOKEN}"

        if client is None:
            client_kwargs = {
                "base_url": self.settings.API_BASE_URL.rstrip("/"),
                "headers": headers,
            }
            if self.settings.HTTP_TIMEOUT_SECONDS is not None:
                client_kwargs["timeout"] = httpx.Timeout(self.settings.HTTP_TIMEOUT_SECONDS)
            client = httpx.AsyncClient(**client_kwargs)
        else:
            client.headers.update(headers)

        self.client = client

        logger.info(f"Initialized REST document API: base_url={self.client.base_url}")

    async def __aenter__(self) -> "RestDocumentApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {method} {path}", url=path) from e
        except httpx.ConnectError as e:
            raise TransportError(
                f"Could not connect to document backend: {self.client.base_url}", url=path
            ) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            url = str(e.request.url)
            logger.warning(f"{method} {url} -> {status_code}: {e.response.text[:160]}")
            raise TransportError(friendly_http_message(status_code, url), status_code, url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}", url=path) from e

    @staticmethod
    def _parse(adapter_or_model: Any, response: httpx.Response) -> Any:
        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(
                f"Malformed response body from {response.request.url}",
                response.status_code,
                str(response.request.url),
            ) from e

        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(payload)
            return adapter_or_model.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                f"Unexpected response shape from {response.request.url}: {e.error_count()} errors",
                response.status_code,
                str(response.request.url),
            ) from e

    async def list_document_types(self) -> List[DocumentType]:
        response = await self._request("GET", self.settings.DOCUMENT_TYPES_PATH)
        schemas = self._parse(_DOCUMENT_TYPE_LIST, response)
        return [schema.to_domain() for schema in schemas]

    async def list_documents(self, owner_id: int) -> List[Document]:
        path = self.settings.OWNER_DOCUMENTS_PATH.format(owner_id=owner_id)
        response = await self._request("GET", path)
        schemas = self._parse(_DOCUMENT_LIST, response)
        return [schema.to_domain() for schema in schemas]

    async def upload_document(
        self,
        owner_id: int,
        type_id: int,
        candidate: UploadCandidate,
    ) -> Optional[Document]:
        path = self.settings.OWNER_DOCUMENTS_PATH.format(owner_id=owner_id)
        content_type = mimetypes.guess_type(candidate.file_name)[0] or "application/octet-stream"

        try:
            payload = candidate.read_payload()
        except OSError as e:
            raise TransportError(f"Could not read {candidate.file_name}: {e}") from e

        response = await self._request(
            "POST",
            path,
            data={"typeId": str(type_id)},
            files={"file": (candidate.file_name, payload, content_type)},
        )
        logger.debug(
            f"POST {path} accepted {candidate.file_name} ({candidate.size_bytes} bytes)",
            extra={"owner_id": owner_id, "file_name": candidate.file_name},
        )
        try:
            return self._parse(DocumentSchema, response).to_domain()
        except TransportError as e:
            # The file is stored; only the echo of it is unusable
            logger.warning(
                f"Upload of {candidate.file_name} accepted but response unreadable: {e}",
                extra={"owner_id": owner_id, "file_name": candidate.file_name},
            )
            return None

    async def delete_document(self, document_id: int) -> None:
        path = self.settings.DOCUMENT_PATH.format(document_id=document_id)
        await self._request("DELETE", path)
