"""Unit tests for DocumentAttachmentScreen

End-to-end flows over the in-memory backend: activation, type selection,
file picker and drag-and-drop batches, deletes, refresh and the busy guard.
"""

import asyncio

import pytest

from attachflow.domain.documents import (
    NO_TYPE_SELECTED,
    BatchInProgressError,
    DragEvent,
    DragEventType,
    DragState,
    ScreenNotReadyError,
    UnknownDocumentTypeError,
    ValidationFailureReason,
    WidgetPhase,
)
from attachflow.domain.documents.drag_state import drop_event
from attachflow.domain.documents.notifications import LOAD_FAILED_MESSAGE
from attachflow.services import DocumentAttachmentScreen, FileOutcomeStatus

OWNER_ID = 42
MB = 1024 * 1024


class TestActivation:
    """Test loading master data and the document list"""

    @pytest.mark.asyncio
    async def test_activate_loads_types_and_documents(self, screen, fake_api):
        """Test activation ends READY with both lists loaded"""
        fake_api.add_server_document(OWNER_ID, "contract.pdf", 2)

        state = await screen.activate(OWNER_ID)

        assert state.phase == WidgetPhase.READY
        assert state.busy is False
        assert [t.type_name for t in state.document_types] == ["Invoice", "Contract"]
        assert [d.document_name for d in state.documents] == ["contract.pdf"]
        assert fake_api.operations() == ["list_document_types", "list_documents"]

    @pytest.mark.asyncio
    async def test_first_type_selected_by_default(self, screen):
        state = await screen.activate(OWNER_ID)
        assert state.selected_type_id == 1
        assert state.selected_type.type_name == "Invoice"

    @pytest.mark.asyncio
    async def test_selection_survives_reload(self, screen):
        """Test re-activation does not override the user's type choice"""
        await screen.activate(OWNER_ID)
        screen.select_type(2)

        state = await screen.activate(OWNER_ID)

        assert state.selected_type_id == 2

    @pytest.mark.asyncio
    async def test_no_types_means_no_selection(self, fake_api, confirm_yes):
        fake_api.types = []
        screen = DocumentAttachmentScreen(fake_api, confirm_yes)

        state = await screen.activate(OWNER_ID)

        assert state.selected_type_id == NO_TYPE_SELECTED
        assert state.selected_type is None

    @pytest.mark.asyncio
    async def test_load_failure_notifies(self, screen, fake_api):
        """Test failed load raises 'Error loading documents' and still ends READY"""
        fake_api.fail_next("list_documents")

        state = await screen.activate(OWNER_ID)

        assert state.phase == WidgetPhase.READY
        assert state.busy is False
        assert state.document_types == ()
        assert state.notification.message == LOAD_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_owner_change_clears_list(self, screen, fake_api):
        fake_api.add_server_document(OWNER_ID, "mine.pdf", 1)
        await screen.activate(OWNER_ID)
        fake_api.fail_next("list_documents")

        state = await screen.activate(7)

        assert state.owner_id == 7
        assert state.documents == ()


class TestTypeSelection:
    """Test select_type guards"""

    @pytest.mark.asyncio
    async def test_unknown_type_raises(self, screen):
        await screen.activate(OWNER_ID)
        with pytest.raises(UnknownDocumentTypeError):
            screen.select_type(99)
        assert screen.state.selected_type_id == 1

    @pytest.mark.asyncio
    async def test_clear_selection(self, screen):
        await screen.activate(OWNER_ID)
        assert screen.select_type(NO_TYPE_SELECTED).selected_type is None

    def test_select_before_activation(self, screen):
        with pytest.raises(ScreenNotReadyError):
            screen.select_type(1)


class TestFileBatches:
    """Test file picker and drag-and-drop batches"""

    @pytest.mark.asyncio
    async def test_submit_files(self, screen, fake_api, make_candidate):
        await screen.activate(OWNER_ID)

        result = await screen.submit_files([make_candidate("report.pdf"), make_candidate("virus.exe")])

        assert [o.status for o in result.outcomes] == [FileOutcomeStatus.UPLOADED, FileOutcomeStatus.REJECTED]
        assert screen.state == result.state
        assert [d.document_name for d in screen.state.documents] == ["report.pdf"]

    @pytest.mark.asyncio
    async def test_selected_type_sent_with_upload(self, screen, fake_api, make_candidate):
        await screen.activate(OWNER_ID)
        screen.select_type(2)

        await screen.submit_files([make_candidate("signed.DOCX")])

        assert screen.state.documents[0].type_id == 2

    @pytest.mark.asyncio
    async def test_no_type_selected_rejects_all(self, screen, fake_api, make_candidate):
        await screen.activate(OWNER_ID)
        screen.select_type(NO_TYPE_SELECTED)
        fake_api.calls.clear()

        result = await screen.submit_files([make_candidate("a.pdf")])

        assert result.outcomes[0].reason == ValidationFailureReason.NO_TYPE_SELECTED
        assert result.state.notification.message == "Please select a document type first"
        assert fake_api.calls == []

    @pytest.mark.asyncio
    async def test_submit_before_activation(self, screen, make_candidate):
        with pytest.raises(ScreenNotReadyError):
            await screen.submit_files([make_candidate("a.pdf")])

    @pytest.mark.asyncio
    async def test_drag_indicator(self, screen):
        await screen.activate(OWNER_ID)

        result, batch = await screen.handle_drag_event(DragEvent(DragEventType.DRAGENTER))
        assert result.state == DragState.DRAG_ACTIVE
        assert batch is None
        assert screen.state.drag_state == DragState.DRAG_ACTIVE

        await screen.handle_drag_event(DragEvent(DragEventType.DRAGLEAVE))
        assert screen.state.drag_state == DragState.IDLE

    @pytest.mark.asyncio
    async def test_drop_forwards_files(self, screen, fake_api, make_candidate):
        """Test a drop uploads exactly the dropped files and ends IDLE"""
        await screen.activate(OWNER_ID)
        await screen.handle_drag_event(DragEvent(DragEventType.DRAGOVER))
        fake_api.calls.clear()

        result, batch = await screen.handle_drag_event(
            drop_event([make_candidate("a.pdf"), make_candidate("b.png")])
        )

        assert result.state == DragState.IDLE
        assert [o.file_name for o in batch.outcomes] == ["a.pdf", "b.png"]
        assert [arg for name, arg in fake_api.calls if name == "upload_document"] == ["a.pdf", "b.png"]
        assert screen.state.drag_state == DragState.IDLE


class TestBusyGuard:
    """Test mutations are refused while a batch is running"""

    @pytest.mark.asyncio
    async def test_second_batch_refused_while_uploading(self, screen, fake_api, make_candidate):
        """Test busy flag blocks batches, deletes and reloads until the batch ends"""
        fake_api.add_server_document(OWNER_ID, "existing.pdf", 1)
        await screen.activate(OWNER_ID)
        gate = fake_api.hold("upload_document")

        running = asyncio.create_task(screen.submit_files([make_candidate("a.pdf")]))
        while fake_api.count("upload_document") == 0:
            await asyncio.sleep(0)

        assert screen.state.busy is True
        assert screen.state.phase == WidgetPhase.UPLOADING
        with pytest.raises(BatchInProgressError):
            await screen.submit_files([make_candidate("b.pdf")])
        with pytest.raises(BatchInProgressError):
            await screen.delete_document(screen.state.documents[0].document_id)
        with pytest.raises(BatchInProgressError):
            await screen.activate(OWNER_ID)

        gate.set()
        result = await running

        assert fake_api.count("upload_document") == 1
        assert result.state.busy is False
        assert screen.state.busy is False

    @pytest.mark.asyncio
    async def test_drop_while_busy_resets_indicator(self, screen, fake_api, make_candidate):
        """Test a refused drop still returns the indicator to IDLE"""
        await screen.activate(OWNER_ID)
        gate = fake_api.hold("upload_document")
        running = asyncio.create_task(screen.submit_files([make_candidate("a.pdf")]))
        while fake_api.count("upload_document") == 0:
            await asyncio.sleep(0)

        await screen.handle_drag_event(DragEvent(DragEventType.DRAGENTER))
        with pytest.raises(BatchInProgressError):
            await screen.handle_drag_event(drop_event([make_candidate("b.pdf")]))
        assert screen.state.drag_state == DragState.IDLE

        gate.set()
        await running


class TestDeleteAndRefresh:
    """Test delete confirmation and on-demand refresh"""

    @pytest.mark.asyncio
    async def test_declined_delete(self, fake_api, confirm_no):
        """Test declining leaves the list untouched and sends nothing"""
        document = fake_api.add_server_document(OWNER_ID, "keep.pdf", 1)
        screen = DocumentAttachmentScreen(fake_api, confirm_no)
        await screen.activate(OWNER_ID)
        fake_api.calls.clear()

        state = await screen.delete_document(document.document_id)

        assert fake_api.calls == []
        assert [d.document_name for d in state.documents] == ["keep.pdf"]

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, screen, fake_api):
        document = fake_api.add_server_document(OWNER_ID, "drop.pdf", 1)
        await screen.activate(OWNER_ID)

        state = await screen.delete_document(document.document_id)

        assert state.documents == ()
        assert state.busy is False
        assert state.notification.message == "Document deleted successfully"

    @pytest.mark.asyncio
    async def test_refresh_picks_up_server_changes(self, screen, fake_api):
        await screen.activate(OWNER_ID)
        fake_api.add_server_document(OWNER_ID, "from-elsewhere.pdf", 1)

        state = await screen.refresh()

        assert [d.document_name for d in state.documents] == ["from-elsewhere.pdf"]
        assert state.busy is False

    @pytest.mark.asyncio
    async def test_refresh_before_activation(self, screen):
        with pytest.raises(ScreenNotReadyError):
            await screen.refresh()


class TestCancellation:
    """Test a cancelled request never leaves the screen busy"""

    @pytest.mark.asyncio
    async def test_cancelled_delete_clears_busy(self, screen, fake_api, make_candidate):
        """Test cancelling an in-flight delete releases the busy indicator"""
        document = fake_api.add_server_document(OWNER_ID, "contract.pdf", 1)
        await screen.activate(OWNER_ID)
        fake_api.hold("delete_document")

        running = asyncio.create_task(screen.delete_document(document.document_id))
        while fake_api.count("delete_document") == 0:
            await asyncio.sleep(0)
        assert screen.state.busy is True

        running.cancel()
        with pytest.raises(asyncio.CancelledError):
            await running

        assert screen.state.busy is False
        assert screen.state.busy_message is None
        result = await screen.submit_files([make_candidate("next.pdf")])
        assert result.uploaded

    @pytest.mark.asyncio
    async def test_cancelled_activation_clears_busy(self, screen, fake_api):
        """Test cancelling a load leaves the screen READY and idle"""
        fake_api.hold("list_documents")

        running = asyncio.create_task(screen.activate(OWNER_ID))
        while fake_api.count("list_documents") == 0:
            await asyncio.sleep(0)
        assert screen.state.busy is True
        assert screen.state.phase == WidgetPhase.LOADING

        running.cancel()
        with pytest.raises(asyncio.CancelledError):
            await running

        assert screen.state.busy is False
        assert screen.state.phase == WidgetPhase.READY
        screen.select_type(NO_TYPE_SELECTED)
