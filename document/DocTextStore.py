# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: DocTextStore
# -----------------------------------------------------------------------------
from typing import Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class DocTextStore(Protocol):
    """
    Persisted extracted text per document.
    Supplies the raw text used when vector retrieval comes back empty.
    """

    def get_text(self, document_id: str) -> Optional[str]:
        """Stored text, or None when the document has none."""
        ...

    def put_text(self, document_id: str, text: str, metadata: Optional[Dict[str, str]] = None) -> None:
        ...

    def delete_text(self, document_id: str) -> bool:
        ...

    def list_document_ids(self) -> List[str]:
        ...
