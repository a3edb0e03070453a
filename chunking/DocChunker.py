# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: DocChunker
# -----------------------------------------------------------------------------
import logging
import re
from typing import Iterator, List, Optional, Tuple

from chunking.DocChunk import DocChunk
from utility.errors import ChunkingConfigError
from utility.logging_utils import get_class_logger

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SENTENCE_END = re.compile(r"[.!?](?=\s)|\n")
_WHITESPACE = re.compile(r"\s")


class DocChunker:
    """
    Splits document text into overlapping character windows.

    Each window is at most chunk_size characters and the next window starts
    `overlap` characters before the previous one ended, so adjacent raw windows
    share exactly `overlap` characters (a stride of chunk_size - overlap when
    no breakpoint moves the end). Window ends snap back to a paragraph break,
    then a sentence end, then whitespace, with a hard cut as the last resort.
    """

    def __init__(
        self,
        *,
        chunk_size: int = 500,
        overlap: int = 100,
        logger: logging.Logger | None = None,
    ):
        self._validate(chunk_size, overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def _validate(chunk_size: int, overlap: int) -> None:
        # guard against bad config that can cause infinite loops
        if chunk_size <= 0:
            raise ChunkingConfigError(f"chunk_size must be > 0, got {chunk_size}")
        if overlap < 0:
            raise ChunkingConfigError(f"overlap must be >= 0, got {overlap}")
        if overlap >= chunk_size:
            raise ChunkingConfigError(
                f"overlap ({overlap}) must be < chunk_size ({chunk_size})"
            )

    def _resolve(self, chunk_size: Optional[int], overlap: Optional[int]) -> Tuple[int, int]:
        size = self.chunk_size if chunk_size is None else chunk_size
        ovl = self.overlap if overlap is None else overlap
        self._validate(size, ovl)
        return size, ovl

    @staticmethod
    def _snap_end(text: str, start: int, end: int, chunk_size: int, overlap: int) -> int:
        """
        Move `end` back to the best natural breakpoint in the tail of [start, end).
        Breakpoints are only accepted past start + max(overlap + 1, chunk_size // 2)
        so the next window always starts after this one.
        """
        floor = start + max(overlap + 1, chunk_size // 2)
        if floor >= end:
            return end

        last = None
        for m in _PARAGRAPH_BREAK.finditer(text, floor, end):
            last = m
        if last is not None:
            return last.end()

        for m in _SENTENCE_END.finditer(text, floor, end):
            last = m
        if last is not None:
            return last.end()

        for m in _WHITESPACE.finditer(text, floor, end):
            last = m
        if last is not None:
            return last.end()

        return end

    def iter_chunks(
        self,
        text: str,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
        *,
        doc_id: str = "",
    ) -> Iterator[DocChunk]:
        """
        Lazily yield chunks in reading order. Each call starts a fresh pass.
        Config is validated here, at call time, not when the generator is first advanced.
        """
        size, ovl = self._resolve(chunk_size, overlap)
        return self._generate(text, size, ovl, doc_id)

    def _generate(self, text: str, size: int, ovl: int, doc_id: str) -> Iterator[DocChunk]:
        n = len(text)
        start = 0
        index = 0

        while start < n:
            end = min(start + size, n)
            if end < n:
                end = self._snap_end(text, start, end, size, ovl)

            window = text[start:end]
            stripped = window.strip()
            if stripped:
                yield DocChunk(
                    doc_id=doc_id,
                    index=index,
                    text=stripped,
                    char_start=start,
                    char_length=end - start,
                )
                index += 1

            if end >= n:
                break
            start = end - ovl

    def split(
        self,
        text: str,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
        *,
        doc_id: str = "",
    ) -> List[DocChunk]:
        chunks = list(self.iter_chunks(text, chunk_size, overlap, doc_id=doc_id))

        if chunks:
            avg_len = sum(len(c.text) for c in chunks) / len(chunks)
            self.logger.info(
                "Chunking summary: doc_id=%s chars=%d chunks=%d avg_len=%.1f chunk_size=%d overlap=%d",
                doc_id or "-",
                len(text),
                len(chunks),
                avg_len,
                self.chunk_size if chunk_size is None else chunk_size,
                self.overlap if overlap is None else overlap,
            )
        else:
            self.logger.warning("No chunks produced for doc_id=%s (chars=%d)", doc_id or "-", len(text))

        return chunks
