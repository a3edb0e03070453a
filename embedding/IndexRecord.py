# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: IndexRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np


@dataclass
class IndexRecord:
    """Embedding vector + searchable metadata, the unit written to the vector index."""
    id: str
    vector: np.ndarray
    metadata: Dict[str, Any]

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[-1])

    def vector_as_list(self) -> List[float]:
        return np.asarray(self.vector, dtype=np.float32).tolist()
