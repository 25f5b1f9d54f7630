"""Document Type Registry - read-only lookup of selectable document types"""

import logging
from typing import List, Sequence

from ..domain.documents.models import NO_TYPE_SELECTED, DocumentType
from ..domain.documents.ports import DocumentApiPort


logger = logging.getLogger(__name__)


class DocumentTypeRegistry:
    """Loads document types once per screen activation.

    Types and their allowlists are never mutated here.
    """

    def __init__(self, api: DocumentApiPort):
        self.api = api

    async def list(self) -> List[DocumentType]:
        """Fetch the selectable types in server order.

        Raises:
            TransportError: If the backend call fails
        """
        types = await self.api.list_document_types()
        logger.debug(f"Loaded {len(types)} document types")
        return types

    @staticmethod
    def resolve_selection(types: Sequence[DocumentType], selected_type_id: int) -> int:
        """Pick the selection to keep after a (re)load.

        - No selection yet: the first returned type becomes the default.
        - Existing selection still present: kept as is, never overridden.
        - Existing selection gone from the new set: falls back to the
          first type so the selection always names a loaded type.

        Returns:
            Selected type id, or NO_TYPE_SELECTED if no types were loaded
        """
        if selected_type_id != NO_TYPE_SELECTED:
            if any(t.type_id == selected_type_id for t in types):
                return selected_type_id
            logger.warning(
                f"Selected document type {selected_type_id} no longer offered, "
                f"falling back to default"
            )

        return types[0].type_id if types else NO_TYPE_SELECTED

