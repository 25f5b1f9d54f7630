"""Attachment pipeline services: type registry, list sync, upload orchestration"""

from .attachment_screen import DocumentAttachmentScreen
from .list_synchronizer import DocumentListSynchronizer
from .type_registry import DocumentTypeRegistry
from .upload_orchestrator import BatchResult, FileOutcome, FileOutcomeStatus, UploadOrchestrator

__all__ = [
    "DocumentAttachmentScreen",
    "DocumentListSynchronizer",
    "DocumentTypeRegistry",
    "BatchResult",
    "FileOutcome",
    "FileOutcomeStatus",
    "UploadOrchestrator",
]
