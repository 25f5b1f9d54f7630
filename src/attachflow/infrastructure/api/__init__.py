from .rest_document_api import RestDocumentApi, friendly_http_message
from .schemas import DocumentSchema, DocumentTypeSchema

__all__ = [
    "RestDocumentApi",
    "friendly_http_message",
    "DocumentSchema",
    "DocumentTypeSchema",
]
