"""Document attachment screen - one instance per owning record view

Owns the ScreenState for its lifetime and routes every input (activation,
type selection, file picker, drag-and-drop, delete) through the pipeline
services. All mutation traffic for the owner is serialized by the busy
indicator: while it is set, uploads, deletes and reloads are refused.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from ..domain.documents.drag_state import DragEvent, DragResult, handle_drag_event
from ..domain.documents.errors import (
    BatchInProgressError,
    ScreenNotReadyError,
    TransportError,
    UnknownDocumentTypeError,
)
from ..domain.documents.models import NO_TYPE_SELECTED, UploadCandidate
from ..domain.documents.notifications import LOAD_FAILED_MESSAGE, Notification
from ..domain.documents.ports import ConfirmPort, DocumentApiPort
from ..domain.documents.screen_state import (
    ScreenState,
    find_type,
    with_busy,
    with_notification,
    with_phase,
    without_busy,
)
from ..domain.documents.widget_phase import WidgetPhase
from .list_synchronizer import DocumentListSynchronizer
from .type_registry import DocumentTypeRegistry
from .upload_orchestrator import BatchResult, UploadOrchestrator


logger = logging.getLogger(__name__)


class DocumentAttachmentScreen:
    """
    Attachment widget for a single owning record.

    Usage:
        screen = DocumentAttachmentScreen(api, confirm=TerminalConfirm())
        await screen.activate(owner_id=42)
        screen.select_type(3)
        result = await screen.submit_files([UploadCandidate.from_path('a.pdf')])
        await screen.delete_document(result.outcomes[0].document.document_id)
    """

    def __init__(
        self,
        api: DocumentApiPort,
        confirm: ConfirmPort,
        max_file_size: Optional[int] = None,
    ):
        self.confirm = confirm
        self.registry = DocumentTypeRegistry(api)
        self.synchronizer = DocumentListSynchronizer(api)
        self.orchestrator = UploadOrchestrator(api, self.synchronizer, max_file_size)
        self._state = ScreenState()

    @property
    def state(self) -> ScreenState:
        return self._state

    def _publish(self, state: ScreenState) -> None:
        # Drag indicator is driven by capture events only; keep the live value
        self._state = replace(state, drag_state=self._state.drag_state)

    def _require_idle(self) -> None:
        if self._state.busy:
            raise BatchInProgressError(
                f"Owner {self._state.owner_id} is busy: {self._state.busy_message}"
            )

    def _require_ready(self) -> None:
        if self._state.phase != WidgetPhase.READY:
            raise ScreenNotReadyError(
                f"Screen is {self._state.phase.value}; call activate() first"
            )

    async def activate(self, owner_id: int) -> ScreenState:
        """Bind the screen to an owner and load master data plus its documents.

        Types are loaded once per activation. An existing type selection
        survives the reload. Both fetches run one after the other; if
        either fails nothing is applied and "Error loading documents" is
        raised as a notification. The busy indicator is cleared even when
        the load is cancelled.

        Raises:
            BatchInProgressError: If a batch or delete is still running
        """
        self._require_idle()

        state = self._state
        if state.owner_id != owner_id:
            state = replace(state, owner_id=owner_id, documents=())
        state = with_busy(with_phase(state, WidgetPhase.LOADING))
        self._publish(state)

        try:
            types = await self.registry.list()
            documents = await self.synchronizer.refresh(owner_id)
        except TransportError as e:
            logger.error(
                f"Error loading documents for owner {owner_id}: {e}",
                exc_info=True,
                extra={"owner_id": owner_id},
            )
            state = with_notification(state, Notification.error(LOAD_FAILED_MESSAGE))
        else:
            selected = self.registry.resolve_selection(types, state.selected_type_id)
            state = replace(
                state,
                document_types=tuple(types),
                documents=tuple(documents),
                selected_type_id=selected,
            )
            logger.info(
                f"Screen ready: types={len(types)}, documents={len(documents)}, "
                f"selected_type_id={selected}",
                extra={"owner_id": owner_id},
            )
        finally:
            state = with_phase(without_busy(state), WidgetPhase.READY)
            self._publish(state)
        return self._state

    def select_type(self, type_id: int) -> ScreenState:
        """Change the active document type (0 clears the selection).

        Raises:
            ScreenNotReadyError: Before activation
            BatchInProgressError: While a batch or delete is running
            UnknownDocumentTypeError: If the id is not among the loaded types
        """
        self._require_idle()
        self._require_ready()

        if type_id != NO_TYPE_SELECTED and find_type(self._state.document_types, type_id) is None:
            raise UnknownDocumentTypeError(type_id)

        self._state = replace(self._state, selected_type_id=type_id)
        return self._state

    async def submit_files(self, files: Sequence[UploadCandidate]) -> BatchResult:
        """Upload a file-picker selection (or a drop) as one batch.

        Raises:
            ScreenNotReadyError: Before activation
            BatchInProgressError: While another batch or delete is running
        """
        self._require_idle()
        self._require_ready()
        return await self.orchestrator.run_batch(self._state, files, on_state=self._publish)

    async def handle_drag_event(self, event: DragEvent) -> Tuple[DragResult, Optional[BatchResult]]:
        """Feed a drag-and-drop event; a drop with files starts a batch.

        The indicator moves first, so a drop always returns it to IDLE
        even if the batch is then refused.

        Returns:
            (drag result, batch result or None when no batch was started)
        """
        result = handle_drag_event(self._state.drag_state, event)
        self._state = replace(self._state, drag_state=result.state)

        if result.batch is None:
            return result, None

        batch_result = await self.submit_files(result.batch)
        return result, batch_result

    async def delete_document(self, document_id: int) -> ScreenState:
        """Delete a document after confirmation and resync the list.

        Raises:
            ScreenNotReadyError: Before activation
            BatchInProgressError: While a batch or another delete is running
            KeyError: If the document is not in the displayed list
        """
        self._require_idle()
        self._require_ready()

        state = await self.synchronizer.delete(
            self._state, document_id, self.confirm, on_state=self._publish
        )
        self._publish(state)
        return self._state

    async def refresh(self) -> ScreenState:
        """Re-fetch the document list on demand (busy while in flight)."""
        self._require_idle()
        self._require_ready()

        state = with_busy(self._state)
        self._publish(state)
        try:
            state = await self.synchronizer.apply_refresh(state)
        finally:
            self._publish(without_busy(state))
        return self._state
