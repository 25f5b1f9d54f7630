"""Wire schemas for the document backend (camelCase JSON)

Parsed with pydantic, then converted into domain dataclasses.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ...domain.documents.models import Document, DocumentType


class DocumentTypeSchema(BaseModel):
    """Document type as returned by the master-data endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    type_id: int = Field(..., alias="typeId", description="Document type id")
    type_name: str = Field(..., alias="typeName", description="Display name")
    allowed_extensions: Optional[str] = Field("", alias="allowedExtensions", description="Comma-separated allowlist")

    def to_domain(self) -> DocumentType:
        return DocumentType.from_allowlist(self.type_id, self.type_name, self.allowed_extensions)


class DocumentSchema(BaseModel):
    """Document as returned by the list and upload endpoints"""
    model_config = ConfigDict(populate_by_name=True)

    document_id: int = Field(..., alias="documentId")
    owner_id: int = Field(
        ...,
        validation_alias=AliasChoices("ownerId", "lrEntryId", "owner_id"),
        description="Owning record id",
    )
    type_id: int = Field(..., alias="typeId")
    document_name: str = Field(..., alias="documentName")
    uploaded_at: datetime = Field(..., alias="uploadedAt")
    type_name: Optional[str] = Field(None, alias="typeName")

    def to_domain(self) -> Document:
        return Document(
            document_id=self.document_id,
            owner_id=self.owner_id,
            type_id=self.type_id,
            document_name=self.document_name,
            uploaded_at=self.uploaded_at,
            type_name=self.type_name,
        )
