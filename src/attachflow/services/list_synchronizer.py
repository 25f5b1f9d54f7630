"""Document List Synchronizer - keeps the displayed list equal to the server's

The local list is a cache. Every refresh is a full fetch followed by a
full replacement; nothing is merged or patched, so out-of-band server
changes always show up and stale entries cannot survive.
"""

import logging
from typing import List, Optional

from ..domain.documents.errors import TransportError
from ..domain.documents.models import Document
from ..domain.documents.notifications import (
    DELETE_FAILED_MESSAGE,
    DELETE_SUCCEEDED_MESSAGE,
    LOAD_FAILED_MESSAGE,
    Notification,
    delete_confirmation_prompt,
)
from ..domain.documents.ports import ConfirmPort, DocumentApiPort
from ..domain.documents.screen_state import (
    ScreenState,
    StateObserver,
    publish,
    with_busy,
    with_documents,
    with_notification,
    without_busy,
)


logger = logging.getLogger(__name__)


class DocumentListSynchronizer:
    """Fetches an owner's canonical document list and applies it to screen state.

    Invoked on screen activation, after each successful upload and after
    each successful delete.

    Usage:
        synchronizer = DocumentListSynchronizer(api)
        state = await synchronizer.apply_refresh(state)
        state = await synchronizer.delete(state, document_id=7, confirm=prompt)
    """

    def __init__(self, api: DocumentApiPort):
        self.api = api

    async def refresh(self, owner_id: int) -> List[Document]:
        """Full fetch of the owner's documents.

        Raises:
            TransportError: If the backend call fails
        """
        documents = await self.api.list_documents(owner_id)
        logger.debug(
            f"Fetched {len(documents)} documents for owner {owner_id}",
            extra={"owner_id": owner_id},
        )
        return documents

    async def apply_refresh(self, state: ScreenState) -> ScreenState:
        """Refresh and replace the displayed list wholesale.

        On failure the current list is left as is and an error
        notification is raised.
        """
        try:
            documents = await self.refresh(state.owner_id)
        except TransportError as e:
            logger.error(
                f"Document list refresh failed for owner {state.owner_id}: {e}",
                exc_info=True,
                extra={"owner_id": state.owner_id},
            )
            return with_notification(state, Notification.error(LOAD_FAILED_MESSAGE))

        return with_documents(state, documents)

    async def delete(
        self,
        state: ScreenState,
        document_id: int,
        confirm: ConfirmPort,
        on_state: Optional[StateObserver] = None,
    ) -> ScreenState:
        """Delete one document after explicit confirmation, then resync.

        Declining the prompt issues no request and returns the state
        unchanged. A failed delete is terminal for this operation only.

        Args:
            state: Current screen state (must hold the document)
            document_id: Document to delete
            confirm: Prompt collaborator
            on_state: Receives intermediate states (busy set, busy cleared) as they happen

        Returns:
            New screen state (busy cleared, also on cancellation)

        Raises:
            KeyError: If the document is not in the displayed list
        """
        document = next((d for d in state.documents if d.document_id == document_id), None)
        if document is None:
            raise KeyError(f"Document {document_id} is not attached to owner {state.owner_id}")

        if not confirm.confirm(delete_confirmation_prompt(document.document_name)):
            logger.info(f"Delete of document {document_id} declined by user")
            return state

        state = publish(with_busy(state), on_state)
        try:
            state = await self._delete_and_refresh(state, document)
        finally:
            # Cleared even when the request is cancelled mid-flight
            state = publish(without_busy(state), on_state)
        return state

    async def _delete_and_refresh(self, state: ScreenState, document: Document) -> ScreenState:
        document_id = document.document_id
        log_extra = {"owner_id": state.owner_id, "document_id": document_id}

        try:
            await self.api.delete_document(document_id)
        except TransportError as e:
            logger.error(f"Delete failed for document {document_id}: {e}", exc_info=True, extra=log_extra)
            return with_notification(state, Notification.error(DELETE_FAILED_MESSAGE))

        logger.info(f"Deleted document {document_id} ({document.document_name})", extra=log_extra)
        state = with_notification(state, Notification.success(DELETE_SUCCEEDED_MESSAGE))
        return await self.apply_refresh(state)
