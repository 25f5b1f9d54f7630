"""Drag-and-drop capture state machine

Two states, three triggers:
    IDLE --dragenter/dragover--> DRAG_ACTIVE
    DRAG_ACTIVE --dragleave--> IDLE
    any --drop--> IDLE (dropped files become a new upload batch)

DRAG_ACTIVE only drives indicator styling. It is never consulted by
validation or upload.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from .models import UploadCandidate


class DragState(str, Enum):
    IDLE = "IDLE"
    DRAG_ACTIVE = "DRAG_ACTIVE"


class DragEventType(str, Enum):
    """Browser drag-and-drop event names"""
    DRAGENTER = "dragenter"
    DRAGOVER = "dragover"
    DRAGLEAVE = "dragleave"
    DROP = "drop"


# Target state per trigger (independent of the current state)
TRANSITIONS: Dict[DragEventType, DragState] = {
    DragEventType.DRAGENTER: DragState.DRAG_ACTIVE,
    DragEventType.DRAGOVER: DragState.DRAG_ACTIVE,
    DragEventType.DRAGLEAVE: DragState.IDLE,
    DragEventType.DROP: DragState.IDLE,
}


@dataclass(frozen=True)
class DragEvent:
    """A drag-and-drop event; `files` is only meaningful for DROP."""
    type: DragEventType
    files: Tuple[UploadCandidate, ...] = ()


@dataclass(frozen=True)
class DragResult:
    """Result of handling one event.

    Attributes:
        state: State after the event
        prevent_default: Always True; the browser must not open the file
        batch: Dropped files to forward as a new batch (None unless a
            non-empty DROP)
    """
    state: DragState
    prevent_default: bool = True
    batch: Optional[Tuple[UploadCandidate, ...]] = None


def handle_drag_event(current: DragState, event: DragEvent) -> DragResult:
    """Apply one event to the drag indicator

    Args:
        current: State before the event
        event: Incoming event

    Returns:
        DragResult with the new state and, for a drop, the batch to upload

    Example:
        >>> handle_drag_event(DragState.IDLE, DragEvent(DragEventType.DRAGOVER)).state
        <DragState.DRAG_ACTIVE: 'DRAG_ACTIVE'>
    """
    new_state = TRANSITIONS.get(event.type, current)

    batch = None
    if event.type == DragEventType.DROP and event.files:
        batch = tuple(event.files)

    return DragResult(state=new_state, prevent_default=True, batch=batch)


def drop_event(files: Sequence[UploadCandidate]) -> DragEvent:
    return DragEvent(type=DragEventType.DROP, files=tuple(files))
