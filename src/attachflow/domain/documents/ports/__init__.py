from .confirm_port import AlwaysConfirm, ConfirmPort
from .document_api_port import DocumentApiPort

__all__ = [
    "AlwaysConfirm",
    "ConfirmPort",
    "DocumentApiPort",
]
