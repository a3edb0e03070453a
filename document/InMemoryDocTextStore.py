# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: InMemoryDocTextStore
# -----------------------------------------------------------------------------
from typing import Dict, List, Optional

from document.DocTextStore import DocTextStore


class InMemoryDocTextStore(DocTextStore):
    """Dict-backed text store for local development and tests."""

    def __init__(self) -> None:
        self._texts: Dict[str, str] = {}
        self._metadata: Dict[str, Dict[str, str]] = {}

    def get_text(self, document_id: str) -> Optional[str]:
        return self._texts.get(document_id)

    def put_text(self, document_id: str, text: str, metadata: Optional[Dict[str, str]] = None) -> None:
        self._texts[document_id] = text
        self._metadata[document_id] = dict(metadata or {})

    def delete_text(self, document_id: str) -> bool:
        self._metadata.pop(document_id, None)
        return self._texts.pop(document_id, None) is not None

    def list_document_ids(self) -> List[str]:
        return list(self._texts)
