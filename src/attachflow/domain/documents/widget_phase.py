"""WidgetPhase state machine for the document attachment screen
"""

from enum import Enum
from typing import Optional, Dict, List


class WidgetPhase(str, Enum):
    """Attachment screen lifecycle

    State flow:
    UNINITIALIZED → LOADING → READY
    READY → UPLOADING → READY (one batch)
    READY → LOADING (re-activation for the same or another owner)
    """
    UNINITIALIZED = "UNINITIALIZED"  # No owner bound yet
    LOADING = "LOADING"              # Master data and document list in flight
    READY = "READY"                  # Accepting batches, deletes, type changes
    UPLOADING = "UPLOADING"          # Batch in progress


ALLOWED_TRANSITIONS: Dict[Optional[WidgetPhase], List[WidgetPhase]] = {
    None: [WidgetPhase.UNINITIALIZED],
    WidgetPhase.UNINITIALIZED: [WidgetPhase.LOADING],
    WidgetPhase.LOADING: [WidgetPhase.READY],
    WidgetPhase.READY: [WidgetPhase.UPLOADING, WidgetPhase.LOADING],
    WidgetPhase.UPLOADING: [WidgetPhase.READY],
}


def can_transition(from_phase: Optional[WidgetPhase], to_phase: WidgetPhase) -> bool:
    """Validate if phase transition is allowed

    Example:
        >>> can_transition(WidgetPhase.READY, WidgetPhase.UPLOADING)
        True
        >>> can_transition(WidgetPhase.UPLOADING, WidgetPhase.UPLOADING)
        False
    """
    return to_phase in ALLOWED_TRANSITIONS.get(from_phase, [])


def get_allowed_transitions(from_phase: Optional[WidgetPhase]) -> List[WidgetPhase]:
    return ALLOWED_TRANSITIONS.get(from_phase, [])
