"""Upload Orchestrator - drives one batch of files through validation and upload

Processing per file, strictly in batch order:
1. Validate against the selected type (rejections are file-scoped, batch continues)
2. Upload (transport failures are file-scoped, batch continues)
3. Resync the owner's document list before the next file starts

The batch is a fold over the candidates: each step takes the screen
state and returns the next one together with that file's outcome.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..domain.documents.errors import BatchInProgressError, ScreenNotReadyError, TransportError
from ..domain.documents.models import Document, DocumentType, UploadCandidate
from ..domain.documents.notifications import (
    Notification,
    refresh_after_upload_failed_message,
    rejection_message,
    upload_failed_message,
    upload_succeeded_message,
)
from ..domain.documents.ports import DocumentApiPort
from ..domain.documents.screen_state import (
    ScreenState,
    StateObserver,
    publish,
    with_busy,
    with_documents,
    with_notification,
    with_phase,
    without_busy,
)
from ..domain.documents.validation import MAX_FILE_SIZE, ValidationFailureReason, validate
from ..domain.documents.widget_phase import WidgetPhase
from ..observability.batch_id import batch_scope
from .list_synchronizer import DocumentListSynchronizer


logger = logging.getLogger(__name__)


class FileOutcomeStatus(str, Enum):
    UPLOADED = "UPLOADED"    # Upload request succeeded
    REJECTED = "REJECTED"    # Validation failed, no request issued
    FAILED = "FAILED"        # Upload request failed


@dataclass(frozen=True)
class FileOutcome:
    """What happened to one file of a batch.

    Attributes:
        file_name: Candidate's file name
        status: UPLOADED, REJECTED or FAILED
        reason: Validation failure reason (REJECTED only)
        document: Created document (UPLOADED only, None if the server
            did not echo it back)
        list_refreshed: False when the upload succeeded but the follow-up
            list refresh failed
        error: Transport error text (FAILED only)
    """
    file_name: str
    status: FileOutcomeStatus
    reason: Optional[ValidationFailureReason] = None
    document: Optional[Document] = None
    list_refreshed: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchResult:
    state: ScreenState
    outcomes: Tuple[FileOutcome, ...]

    @property
    def uploaded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == FileOutcomeStatus.UPLOADED]

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status != FileOutcomeStatus.UPLOADED]


class UploadOrchestrator:
    """
    Sequential batch uploader for one owning record.

    Responsibilities:
    - Hold the busy indicator for the whole batch
    - Validate each file before any request
    - Upload valid files one at a time, never concurrently
    - Resync the document list after every successful upload
    - Surface every failure as a file-scoped notification

    Usage:
        orchestrator = UploadOrchestrator(api, DocumentListSynchronizer(api))
        result = await orchestrator.run_batch(state, candidates)
        state = result.state
    """

    def __init__(
        self,
        api: DocumentApiPort,
        synchronizer: DocumentListSynchronizer,
        max_file_size: Optional[int] = None,
    ):
        """
        Initialize upload orchestrator.

        Args:
            api: Document backend
            synchronizer: Used to resync the list after each upload
            max_file_size: Size cap in bytes (defaults to MAX_FILE_SIZE)
        """
        self.api = api
        self.synchronizer = synchronizer
        self.max_file_size = max_file_size if max_file_size is not None else MAX_FILE_SIZE

    async def run_batch(
        self,
        state: ScreenState,
        candidates: Sequence[UploadCandidate],
        on_state: Optional[StateObserver] = None,
    ) -> BatchResult:
        """Process a batch file by file and return the final state with per-file outcomes.

        The busy indicator is set before the first file and cleared only
        after the last one, whatever happened to each file. The batch is
        never aborted early.

        Args:
            state: Screen state, must be READY and not busy
            candidates: Files in the order they were picked or dropped
            on_state: Receives every intermediate state (busy set, list
                refreshed, busy cleared) as soon as it exists

        Returns:
            BatchResult with outcomes in batch order

        Raises:
            BatchInProgressError: If another batch (or delete) holds the busy indicator
            ScreenNotReadyError: If the screen was never activated
        """
        if state.busy:
            raise BatchInProgressError(
                f"A batch is already running for owner {state.owner_id}"
            )
        if state.phase != WidgetPhase.READY:
            raise ScreenNotReadyError(
                f"Cannot upload while screen is {state.phase.value}"
            )

        document_type = state.selected_type
        outcomes: List[FileOutcome] = []

        with batch_scope():
            logger.info(
                f"Starting upload batch: files={len(candidates)}, "
                f"type_id={state.selected_type_id}",
                extra={"owner_id": state.owner_id},
            )

            state = publish(with_busy(with_phase(state, WidgetPhase.UPLOADING)), on_state)
            try:
                for candidate in candidates:
                    state, outcome = await self._process_file(state, document_type, candidate)
                    outcomes.append(outcome)
                    publish(state, on_state)
            finally:
                state = publish(with_phase(without_busy(state), WidgetPhase.READY), on_state)

            result = BatchResult(state=state, outcomes=tuple(outcomes))
            logger.info(
                f"Upload batch complete: uploaded={len(result.uploaded)}, "
                f"failed={len(result.failed)}",
                extra={"owner_id": state.owner_id},
            )
        return result

    async def _process_file(
        self,
        state: ScreenState,
        document_type: Optional[DocumentType],
        candidate: UploadCandidate,
    ) -> Tuple[ScreenState, FileOutcome]:
        file_name = candidate.file_name
        log_extra = {"owner_id": state.owner_id, "file_name": file_name}

        outcome = validate(candidate, document_type, self.max_file_size)
        if not outcome.is_valid:
            logger.warning(
                f"Rejected {file_name}: {outcome.reason.value}",
                extra=log_extra,
            )
            message = rejection_message(outcome.reason, file_name, document_type, self.max_file_size)
            state = with_notification(state, Notification.error(message, file_name))
            return state, FileOutcome(file_name, FileOutcomeStatus.REJECTED, reason=outcome.reason)

        try:
            created = await self.api.upload_document(state.owner_id, document_type.type_id, candidate)
        except TransportError as e:
            logger.error(f"Upload failed for {file_name}: {e}", exc_info=True, extra=log_extra)
            state = with_notification(state, Notification.error(upload_failed_message(file_name), file_name))
            return state, FileOutcome(file_name, FileOutcomeStatus.FAILED, error=str(e))

        if created is None:
            logger.info(f"Uploaded {file_name}", extra=log_extra)
        else:
            logger.info(f"Uploaded {file_name} as document {created.document_id}", extra=log_extra)
        state = with_notification(state, Notification.success(upload_succeeded_message(file_name), file_name))

        # Resync now, not at batch end: the list reflects each upload as it lands
        try:
            documents = await self.synchronizer.refresh(state.owner_id)
        except TransportError as e:
            logger.error(
                f"List refresh after uploading {file_name} failed: {e}",
                exc_info=True,
                extra=log_extra,
            )
            state = with_notification(
                state,
                Notification.error(refresh_after_upload_failed_message(file_name), file_name),
            )
            return state, FileOutcome(
                file_name, FileOutcomeStatus.UPLOADED, document=created, list_refreshed=False
            )

        state = with_documents(state, documents)
        return state, FileOutcome(
            file_name, FileOutcomeStatus.UPLOADED, document=created, list_refreshed=True
        )
