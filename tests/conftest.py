"""Pytest fixtures for the attachment pipeline.

Provides:
- FakeDocumentApi: in-memory DocumentApiPort that records every call
  and can be told to fail specific operations
- Scripted confirmation prompts
- Sample document types and upload candidates

Usage:
    async def test_upload(fake_api, screen, make_candidate):
        await screen.activate(42)
        result = await screen.submit_files([make_candidate("report.pdf")])
        assert fake_api.count("upload_document") == 1
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

import pytest

from attachflow.domain.documents.errors import TransportError
from attachflow.domain.documents.models import Document, DocumentType, UploadCandidate
from attachflow.domain.documents.ports import ConfirmPort, DocumentApiPort
from attachflow.services import DocumentAttachmentScreen


OWNER_ID = 42
MB = 1024 * 1024


class FakeDocumentApi(DocumentApiPort):
    """In-memory document backend."""

    def __init__(self, types: List[DocumentType]):
        self.types = list(types)
        self.documents: Dict[int, List[Document]] = {}
        self.calls: List[Tuple[str, object]] = []
        self._next_id = 1
        self._failures: Dict[str, int] = {}
        self.fail_upload_for: Set[str] = set()
        self.return_created = True
        self._gates: Dict[str, asyncio.Event] = {}

    # --- test controls -------------------------------------------------

    def fail_next(self, operation: str, times: int = 1) -> None:
        """Make the next `times` calls of `operation` raise TransportError."""
        self._failures[operation] = self._failures.get(operation, 0) + times

    def add_server_document(self, owner_id: int, name: str, type_id: int) -> Document:
        """Create a document out of band (as another client would)."""
        document = Document(
            document_id=self._next_id,
            owner_id=owner_id,
            type_id=type_id,
            document_name=name,
            uploaded_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        self._next_id += 1
        self.documents.setdefault(owner_id, []).append(document)
        return document

    def hold(self, operation: str) -> asyncio.Event:
        """Block calls of `operation` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[operation] = gate
        return gate

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def operations(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def _enter(self, operation: str, argument: object) -> None:
        self.calls.append((operation, argument))
        gate = self._gates.get(operation)
        if gate is not None:
            await gate.wait()
        self._maybe_fail(operation)

    def _maybe_fail(self, operation: str) -> None:
        remaining = self._failures.get(operation, 0)
        if remaining:
            self._failures[operation] = remaining - 1
            raise TransportError(f"{operation} failed", status_code=500)

    # Stands in for RestDocumentApi, which is used as an async context manager
    async def __aenter__(self) -> "FakeDocumentApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        pass

    # --- DocumentApiPort -----------------------------------------------

    async def list_document_types(self) -> List[DocumentType]:
        await self._enter("list_document_types", None)
        return list(self.types)

    async def list_documents(self, owner_id: int) -> List[Document]:
        await self._enter("list_documents", owner_id)
        return list(self.documents.get(owner_id, []))

    async def upload_document(self, owner_id: int, type_id: int, candidate: UploadCandidate) -> Optional[Document]:
        await self._enter("upload_document", candidate.file_name)
        if candidate.file_name in self.fail_upload_for:
            raise TransportError(f"Upload of {candidate.file_name} rejected", status_code=500)
        created = self.add_server_document(owner_id, candidate.file_name, type_id)
        return created if self.return_created else None

    async def delete_document(self, document_id: int) -> None:
        await self._enter("delete_document", document_id)
        for owner_documents in self.documents.values():
            owner_documents[:] = [d for d in owner_documents if d.document_id != document_id]


class ScriptedConfirm(ConfirmPort):
    """Answers with a fixed value and remembers the prompts it saw."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.prompts: List[str] = []

    def confirm(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


@pytest.fixture
def invoice_type():
    return DocumentType.from_allowlist(1, "Invoice", "pdf,jpg,png")


@pytest.fixture
def contract_type():
    return DocumentType.from_allowlist(2, "Contract", "PDF, DOCX")


@pytest.fixture
def fake_api(invoice_type, contract_type):
    return FakeDocumentApi([invoice_type, contract_type])


@pytest.fixture
def confirm_yes():
    return ScriptedConfirm(True)


@pytest.fixture
def confirm_no():
    return ScriptedConfirm(False)


@pytest.fixture
def screen(fake_api, confirm_yes):
    return DocumentAttachmentScreen(fake_api, confirm_yes, max_file_size=10 * MB)


@pytest.fixture
def make_candidate():
    """Factory for candidates with a declared size (payload bytes stay tiny)."""
    def _make(name: str, size_bytes: int = 2 * MB) -> UploadCandidate:
        return UploadCandidate(file_name=name, size_bytes=size_bytes, file_handle=b"x" * 16)
    return _make
