"""Exceptions raised by the attachment pipeline"""

from typing import Optional


class TransportError(Exception):
    """Network or server failure talking to the document backend.

    Attributes:
        status_code: HTTP status when the server answered, else None
        url: Request URL when known
    """

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class BatchInProgressError(Exception):
    """A mutation was submitted while the busy indicator is set."""
    pass


class ScreenNotReadyError(Exception):
    """Operation requires the screen to be activated and READY."""
    pass


class UnknownDocumentTypeError(ValueError):
    """Selected type id is neither 0 nor in the loaded type set."""

    def __init__(self, type_id: int):
        self.type_id = type_id
        super().__init__(f"Unknown document type: {type_id}")
