# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: DocVectorIndex
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from embedding.IndexRecord import IndexRecord


@dataclass
class VectorMatch:
    """One query hit. score: higher is more similar, in the provider's native range."""
    id: str
    score: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> Optional[str]:
        value = self.metadata.get("text")
        return value if isinstance(value, str) and value.strip() else None

    @property
    def document_id(self) -> Optional[str]:
        return self.metadata.get("document_id")

    @property
    def chunk_index(self) -> Optional[int]:
        return self.metadata.get("chunk_index")


@dataclass(frozen=True)
class IndexStats:
    record_count: int
    dimension: int


@runtime_checkable
class DocVectorIndex(Protocol):
    def test_connection(self) -> bool:
        ...

    def upsert(self, records: Sequence[IndexRecord]) -> None:
        ...

    def query(
            self,
            vector: np.ndarray,
            top_k: int,
            where: Dict[str, Any] | None = None,
    ) -> List[VectorMatch]:
        """Matches in descending score order."""
        ...

    def fetch_ids(self, ids: Sequence[str]) -> List[str]:
        """Subset of ids currently visible in the index."""
        ...

    def list_ids(self, where: Dict[str, Any]) -> List[str]:
        ...

    def delete(self, ids: Sequence[str]) -> None:
        ...

    def delete_where(self, where: Dict[str, Any]) -> int:
        ...

    def stats(self) -> IndexStats:
        ...
