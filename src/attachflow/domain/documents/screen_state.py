"""Explicit state of one attachment screen instance

All ambient UI flags (busy overlay, notifications, drag indicator) live
here. Services take a ScreenState and return a new one; nothing is
mutated in place.
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from .drag_state import DragState
from .models import NO_TYPE_SELECTED, Document, DocumentType
from .notifications import BUSY_MESSAGE, Notification
from .widget_phase import WidgetPhase, can_transition


@dataclass(frozen=True)
class ScreenState:
    owner_id: Optional[int] = None
    phase: WidgetPhase = WidgetPhase.UNINITIALIZED
    document_types: Tuple[DocumentType, ...] = ()
    selected_type_id: int = NO_TYPE_SELECTED
    documents: Tuple[Document, ...] = ()
    drag_state: DragState = DragState.IDLE
    busy: bool = False
    busy_message: Optional[str] = None
    notifications: Tuple[Notification, ...] = ()

    @property
    def notification(self) -> Optional[Notification]:
        """The notification currently on display (most recent one)."""
        return self.notifications[-1] if self.notifications else None

    @property
    def selected_type(self) -> Optional[DocumentType]:
        if self.selected_type_id == NO_TYPE_SELECTED:
            return None
        return find_type(self.document_types, self.selected_type_id)


def find_type(types: Tuple[DocumentType, ...], type_id: int) -> Optional[DocumentType]:
    for document_type in types:
        if document_type.type_id == type_id:
            return document_type
    return None


def with_phase(state: ScreenState, phase: WidgetPhase) -> ScreenState:
    """Move to another phase, enforcing ALLOWED_TRANSITIONS

    Raises:
        ValueError: If the transition is not allowed
    """
    if not can_transition(state.phase, phase):
        raise ValueError(f"Invalid phase transition: {state.phase.value} -> {phase.value}")
    return replace(state, phase=phase)


def with_notification(state: ScreenState, notification: Notification) -> ScreenState:
    return replace(state, notifications=state.notifications + (notification,))


def with_busy(state: ScreenState, message: str = BUSY_MESSAGE) -> ScreenState:
    return replace(state, busy=True, busy_message=message)


def without_busy(state: ScreenState) -> ScreenState:
    return replace(state, busy=False, busy_message=None)


def with_documents(state: ScreenState, documents) -> ScreenState:
    """Replace the displayed list wholesale (never merged or patched)."""
    return replace(state, documents=tuple(documents))


StateObserver = Callable[[ScreenState], None]


def publish(state: ScreenState, observer: Optional[StateObserver]) -> ScreenState:
    """Hand an intermediate state to the observer (if any) and return it."""
    if observer is not None:
        observer(state)
    return state
