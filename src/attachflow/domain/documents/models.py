"""Domain models for per-record document attachments.

These are plain dataclasses (not wire schemas). The REST adapter maps
backend payloads onto them, see infrastructure/api/schemas.py.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from .validation import infer_extension, parse_allowed_extensions


# Sentinel for "no document type selected"
NO_TYPE_SELECTED = 0


@dataclass(frozen=True)
class DocumentType:
    """Selectable document type with its extension allowlist.

    Attributes:
        type_id: Backend identifier (never 0, which is the "none" sentinel)
        type_name: Display name (e.g., 'Invoice')
        allowed_extensions: Ordered, de-duplicated, lowercase tokens
            (normalized on construction, whatever the caller passes)
    """
    type_id: int
    type_name: str
    allowed_extensions: Tuple[str, ...] = ()

    def __post_init__(self):
        normalized = parse_allowed_extensions(",".join(self.allowed_extensions))
        object.__setattr__(self, "allowed_extensions", normalized)

    @classmethod
    def from_allowlist(cls, type_id: int, type_name: str, allowlist: Optional[str]) -> "DocumentType":
        """Build a type from the backend's comma-separated allowlist string.

        Example:
            >>> DocumentType.from_allowlist(1, 'Invoice', ' PDF, jpg ,png').allowed_extensions
            ('pdf', 'jpg', 'png')
        """
        return cls(
            type_id=type_id,
            type_name=type_name,
            allowed_extensions=parse_allowed_extensions(allowlist),
        )

    @property
    def allowlist_label(self) -> str:
        """Allowlist as shown next to the type selector ('PDF,JPG,PNG')."""
        return ",".join(ext.upper() for ext in self.allowed_extensions)

    @property
    def accept_attribute(self) -> str:
        """Value for a file-picker `accept` filter ('.pdf,.jpg,.png')."""
        return ",".join(f".{ext}" for ext in self.allowed_extensions)


@dataclass(frozen=True)
class Document:
    """A document attached to an owning record.

    The server copy is authoritative; clients only ever hold a
    wholesale-replaced snapshot of the owner's list.
    """
    document_id: int
    owner_id: int
    type_id: int
    document_name: str
    uploaded_at: datetime
    type_name: Optional[str] = None


FileHandle = Union[Path, BinaryIO, bytes]


@dataclass(frozen=True)
class UploadCandidate:
    """A file offered for upload. Ephemeral, never persisted.

    Attributes:
        file_name: Name as seen by the user (used for extension and messages)
        size_bytes: Payload size in bytes
        file_handle: Path, open binary stream, or raw bytes
        inferred_extension: Lowercase extension, None if the name has none
    """
    file_name: str
    size_bytes: int
    file_handle: FileHandle = field(repr=False, compare=False)
    inferred_extension: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadCandidate":
        """Candidate for a file on disk. Size comes from stat(), bytes are read lazily."""
        path = Path(path)
        return cls(
            file_name=path.name,
            size_bytes=path.stat().st_size,
            file_handle=path,
            inferred_extension=infer_extension(path.name),
        )

    @classmethod
    def from_bytes(cls, file_name: str, content: bytes) -> "UploadCandidate":
        return cls(
            file_name=file_name,
            size_bytes=len(content),
            file_handle=content,
            inferred_extension=infer_extension(file_name),
        )

    def read_payload(self) -> bytes:
        """Return the file content for the multipart request."""
        handle = self.file_handle
        if isinstance(handle, bytes):
            return handle
        if isinstance(handle, Path):
            return handle.read_bytes()
        return handle.read()
