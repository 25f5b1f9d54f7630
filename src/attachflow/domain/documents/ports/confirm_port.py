"""Confirm Port - synchronous yes/no prompt gating destructive actions."""

from abc import ABC, abstractmethod


class ConfirmPort(ABC):

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask the user; True only on an explicit yes."""
        pass


class AlwaysConfirm(ConfirmPort):
    """Non-interactive confirmation (e.g. CLI `--yes`)."""

    def confirm(self, message: str) -> bool:
        return True
