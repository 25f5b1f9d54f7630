"""Documents domain module - attachment models, validation, screen state machines
"""

from .drag_state import DragEvent, DragEventType, DragResult, DragState, handle_drag_event
from .errors import (
    BatchInProgressError,
    ScreenNotReadyError,
    TransportError,
    UnknownDocumentTypeError,
)
from .models import NO_TYPE_SELECTED, Document, DocumentType, UploadCandidate
from .notifications import Notification, NotificationSeverity
from .screen_state import ScreenState
from .validation import (
    MAX_FILE_SIZE,
    ValidationFailureReason,
    ValidationOutcome,
    format_file_size,
    infer_extension,
    parse_allowed_extensions,
    validate,
)
from .widget_phase import ALLOWED_TRANSITIONS, WidgetPhase, can_transition

__all__ = [
    # Models
    "NO_TYPE_SELECTED",
    "Document",
    "DocumentType",
    "UploadCandidate",
    # Validation
    "MAX_FILE_SIZE",
    "ValidationFailureReason",
    "ValidationOutcome",
    "format_file_size",
    "infer_extension",
    "parse_allowed_extensions",
    "validate",
    # Drag and drop
    "DragEvent",
    "DragEventType",
    "DragResult",
    "DragState",
    "handle_drag_event",
    # Screen
    "ALLOWED_TRANSITIONS",
    "WidgetPhase",
    "can_transition",
    "ScreenState",
    "Notification",
    "NotificationSeverity",
    # Errors
    "BatchInProgressError",
    "ScreenNotReadyError",
    "TransportError",
    "UnknownDocumentTypeError",
]
