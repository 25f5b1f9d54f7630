"""Document API Port - Domain interface for the document backend.

The backend owns document types, the per-owner document lists, uploads
and deletes. Adapters must implement this interface (REST over HTTP in
production, an in-memory fake in tests).

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Document, DocumentType, UploadCandidate


class DocumentApiPort(ABC):
    """Port interface for the document backend.

    Every method is a suspension point and is awaited to completion by
    the caller before the pipeline moves on. Implementations must raise
    TransportError for any network/server failure; no other exception
    type is expected to escape.

    Example Usage:
        api = RestDocumentApi(settings)

        types = await api.list_document_types()
        created = await api.upload_document(
            owner_id=42,
            type_id=types[0].type_id,
            candidate=UploadCandidate.from_path('report.pdf'),
        )
        documents = await api.list_documents(owner_id=42)
    """

    @abstractmethod
    async def list_document_types(self) -> List[DocumentType]:
        """Fetch selectable document types in server order.

        Raises:
            TransportError: If the request fails
        """
        pass

    @abstractmethod
    async def list_documents(self, owner_id: int) -> List[Document]:
        """Fetch the full, current document list of an owning record.

        Args:
            owner_id: Owning record id

        Returns:
            List[Document]: Server order, authoritative

        Raises:
            TransportError: If the request fails
        """
        pass

    @abstractmethod
    async def upload_document(
        self,
        owner_id: int,
        type_id: int,
        candidate: UploadCandidate,
    ) -> Optional[Document]:
        """Upload one file as a new document of the given type.

        Sent as multipart form data: `typeId` plus `file`.

        Args:
            owner_id: Owning record id
            type_id: Selected document type
            candidate: Validated file to send

        Returns:
            Optional[Document]: The created document, or None when the server
                accepted the file but its answer carries no readable document

        Raises:
            TransportError: If the request fails
        """
        pass

    @abstractmethod
    async def delete_document(self, document_id: int) -> None:
        """Delete a document by id. The server answers with no content.

        Raises:
            TransportError: If the request fails
        """
        pass
