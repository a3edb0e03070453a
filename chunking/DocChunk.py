# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: DocChunk
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict


def make_record_id(doc_id: str, index: int) -> str:
    """Deterministic vector-index id for chunk `index` of `doc_id`."""
    return f"{doc_id}_chunk_{index}"


@dataclass(frozen=True)
class DocChunk:
    """
    A contiguous window of a document's extracted text.
    char_start/char_length describe the raw window in the source text;
    `text` is that window stripped of surrounding whitespace (never empty).
    """

    doc_id: str
    index: int
    text: str
    char_start: int
    char_length: int

    @property
    def char_end(self) -> int:
        return self.char_start + self.char_length

    @property
    def record_id(self) -> str:
        return make_record_id(self.doc_id, self.index)

    def to_metadata(self) -> Dict[str, Any]:
        """Metadata stored alongside the vector; text is duplicated so retrieval needs no second lookup."""
        return {
            "document_id": self.doc_id,
            "chunk_index": self.index,
            "text": self.text,
            "char_start": self.char_start,
            "char_length": self.char_length,
        }

    def short_preview(self, n: int = 120) -> str:
        """Return a compact text preview for logging/debugging."""
        clean = " ".join(self.text.split())
        preview = (clean[:n] + "...") if len(clean) > n else clean
        return f"[{self.doc_id} #{self.index}] {preview}"
