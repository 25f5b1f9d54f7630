"""User-visible notifications raised by the attachment pipeline"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import DocumentType
from .validation import ValidationFailureReason, format_file_size


class NotificationSeverity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    severity: NotificationSeverity
    message: str
    file_name: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == NotificationSeverity.ERROR

    @classmethod
    def success(cls, message: str, file_name: Optional[str] = None) -> "Notification":
        return cls(NotificationSeverity.SUCCESS, message, file_name)

    @classmethod
    def error(cls, message: str, file_name: Optional[str] = None) -> "Notification":
        return cls(NotificationSeverity.ERROR, message, file_name)


LOAD_FAILED_MESSAGE = "Error loading documents"
DELETE_SUCCEEDED_MESSAGE = "Document deleted successfully"
DELETE_FAILED_MESSAGE = "Error deleting document"
BUSY_MESSAGE = "Processing documents..."


def rejection_message(
    reason: ValidationFailureReason,
    file_name: str,
    document_type: Optional[DocumentType],
    max_size: int,
) -> str:
    """Message shown when validation rejects a file"""
    if reason == ValidationFailureReason.NO_TYPE_SELECTED:
        return "Please select a document type first"
    if reason == ValidationFailureReason.EXTENSION_NOT_ALLOWED:
        allowed = ",".join(document_type.allowed_extensions) if document_type else ""
        return f"File {file_name} has invalid extension. Allowed: {allowed}"
    # "10MB", "512KB", "1.5MB"
    limit = format_file_size(max_size).replace(" ", "")
    return f"File {file_name} is too large. Maximum size is {limit}."


def upload_succeeded_message(file_name: str) -> str:
    return f"File {file_name} uploaded successfully"


def upload_failed_message(file_name: str) -> str:
    return f"Error uploading file {file_name}"


def refresh_after_upload_failed_message(file_name: str) -> str:
    return f"File {file_name} uploaded, but the document list could not be refreshed"


def delete_confirmation_prompt(document_name: str) -> str:
    return f"Are you sure you want to delete {document_name}?"
