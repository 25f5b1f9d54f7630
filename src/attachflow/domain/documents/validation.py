"""Upload candidate validation against a document type's allowlist and size cap

Rules, evaluated in order (first failure wins):
1. No document type selected -> NO_TYPE_SELECTED (candidate is not inspected)
2. Extension missing or not in the type's allowlist -> EXTENSION_NOT_ALLOWED
3. Size strictly above the cap -> TOO_LARGE
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .models import DocumentType, UploadCandidate


# File size limit (default 10MB, configurable via env)
MAX_FILE_SIZE = int(os.getenv('MAX_UPLOAD_SIZE_BYTES', 10 * 1024 * 1024))


class ValidationFailureReason(str, Enum):
    """Why a candidate was rejected before any request was made"""
    NO_TYPE_SELECTED = "NO_TYPE_SELECTED"
    EXTENSION_NOT_ALLOWED = "EXTENSION_NOT_ALLOWED"
    TOO_LARGE = "TOO_LARGE"


@dataclass(frozen=True)
class ValidationOutcome:
    """Valid, or Invalid(reason)."""
    reason: Optional[ValidationFailureReason] = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls()

    @classmethod
    def invalid(cls, reason: ValidationFailureReason) -> "ValidationOutcome":
        return cls(reason=reason)


def parse_allowed_extensions(allowlist: Optional[str]) -> Tuple[str, ...]:
    """Parse a comma-separated allowlist into ordered, unique, lowercase tokens

    Args:
        allowlist: Raw allowlist from the backend (e.g., 'PDF, jpg,png')

    Returns:
        Tuple of tokens in first-seen order, empty tokens dropped

    Example:
        >>> parse_allowed_extensions(' PDF, jpg,,pdf ')
        ('pdf', 'jpg')
        >>> parse_allowed_extensions('')
        ()
    """
    if not allowlist:
        return ()

    tokens = []
    for raw in allowlist.split(','):
        token = raw.strip().lower()
        if token and token not in tokens:
            tokens.append(token)
    return tuple(tokens)


def infer_extension(file_name: str) -> Optional[str]:
    """Extract the extension: text after the final '.', trimmed and lowercased

    Args:
        file_name: File name as offered by the picker or drop event

    Returns:
        Extension without the dot, or None if the name has no '.' or ends with one

    Example:
        >>> infer_extension('Report.Final.PDF')
        'pdf'
        >>> infer_extension('README') is None
        True
        >>> infer_extension('archive.') is None
        True
    """
    if '.' not in file_name:
        return None

    extension = file_name.rsplit('.', 1)[1].strip().lower()
    return extension or None


def is_extension_allowed(extension: Optional[str], document_type: "DocumentType") -> bool:
    """Case-insensitive, whitespace-trimmed membership test against the allowlist"""
    if not extension:
        return False
    return extension.strip().lower() in document_type.allowed_extensions


def validate(
    candidate: "UploadCandidate",
    document_type: Optional["DocumentType"],
    max_size: Optional[int] = None,
) -> ValidationOutcome:
    """Decide whether a candidate may be uploaded for the selected type

    Pure function: no I/O, same inputs always give the same outcome.

    Args:
        candidate: File offered for upload
        document_type: Active document type, None when nothing is selected
        max_size: Size cap in bytes (defaults to MAX_FILE_SIZE)

    Returns:
        ValidationOutcome.valid() or ValidationOutcome.invalid(reason)

    Example:
        >>> pdf = DocumentType.from_allowlist(1, 'Invoice', 'pdf,jpg,png')
        >>> validate(UploadCandidate.from_bytes('report.pdf', b'%PDF'), pdf).is_valid
        True
        >>> validate(UploadCandidate.from_bytes('virus.exe', b'MZ'), pdf).reason
        <ValidationFailureReason.EXTENSION_NOT_ALLOWED: 'EXTENSION_NOT_ALLOWED'>
    """
    if document_type is None:
        return ValidationOutcome.invalid(ValidationFailureReason.NO_TYPE_SELECTED)

    if max_size is None:
        max_size = MAX_FILE_SIZE

    extension = candidate.inferred_extension
    if extension is None:
        extension = infer_extension(candidate.file_name)

    if not is_extension_allowed(extension, document_type):
        return ValidationOutcome.invalid(ValidationFailureReason.EXTENSION_NOT_ALLOWED)

    if candidate.size_bytes > max_size:
        return ValidationOutcome.invalid(ValidationFailureReason.TOO_LARGE)

    return ValidationOutcome.valid()


def format_file_size(size_bytes: int) -> str:
    """Human-readable size with up to two decimals

    Example:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
        >>> format_file_size(2 * 1024 * 1024)
        '2 MB'
    """
    if size_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1

    return f"{round(value, 2):g} {units[index]}"
