# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: ChromaDocVectorIndex
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import chromadb
import numpy as np
from chromadb import ClientAPI
from chromadb.api.models.Collection import Collection

from config.Config import Config
from embedding.IndexRecord import IndexRecord
from settings import VECTOR_TIMEOUT_SECONDS
from utility.logging_utils import get_class_logger
from utility.timeouts import TimeoutRunner
from vectorstore.DocVectorIndex import DocVectorIndex, IndexStats, VectorMatch


@dataclass
class ChromaDocVectorIndex(DocVectorIndex):
    """
    Chroma Cloud collection in cosine space.
    Chroma returns cosine distance; matches carry score = 1 - distance.
    Every call is raced against timeout_s.
    """
    cfg: Config
    timeout_s: float = VECTOR_TIMEOUT_SECONDS
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.collection_name = self.cfg.chroma_collection
        self.dimension = self.cfg.embed_dimension
        self._runner = TimeoutRunner(name="docqa-chroma")

        self.logger.info(
            "Initialising Chroma Cloud client (tenant=%s, database=%s)",
            self.cfg.chroma_tenant,
            self.cfg.chroma_database,
        )

        self.client: ClientAPI = chromadb.CloudClient(
            tenant=self.cfg.chroma_tenant,
            database=self.cfg.chroma_database,
            api_key=self.cfg.chroma_api_key,
        )

        self.collection: Collection = self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        self.logger.info(
            "Chroma collection ready: '%s' (tenant=%s, db=%s, expected_dim=%d)",
            self.collection_name,
            self.cfg.chroma_tenant,
            self.cfg.chroma_database,
            self.dimension,
        )

    def _call(self, fn, **kwargs):
        return self._runner.call(fn, self.timeout_s, **kwargs)

    def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma and our collection?
        """
        try:
            # count() is cheap and exercises the connection + auth
            _ = self._call(self.collection.count)
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    def upsert(self, records: Sequence[IndexRecord]) -> None:
        if not records:
            return

        self._call(
            self.collection.upsert,
            ids=[r.id for r in records],
            embeddings=[r.vector_as_list() for r in records],
            metadatas=[dict(r.metadata) for r in records],
            documents=[str(r.metadata.get("text", "")) for r in records],
        )
        self.logger.info(
            "Upserted %d records into Chroma collection '%s' (first=%s)",
            len(records),
            self.collection_name,
            records[0].id,
        )

    def query(
            self,
            vector: np.ndarray,
            top_k: int,
            where: Dict[str, Any] | None = None,
    ) -> List[VectorMatch]:
        query_kwargs: Dict[str, Any] = {
            "query_embeddings": [np.asarray(vector, dtype=np.float32).tolist()],
            "n_results": top_k,
            "include": ["metadatas", "distances"],
        }
        if where:
            self.logger.debug("Applying metadata filter (where=%s)", where)
            query_kwargs["where"] = where

        res = self._call(self.collection.query, **query_kwargs)

        # Chroma returns list-of-lists (one list per query embedding)
        ids0 = (res.get("ids") or [[]])[0] or []
        metas0 = (res.get("metadatas") or [[]])[0] or []
        dists0 = (res.get("distances") or [[]])[0] or []

        matches: List[VectorMatch] = []
        for i, record_id in enumerate(ids0):
            md = metas0[i] if i < len(metas0) and isinstance(metas0[i], dict) else {}
            dist = dists0[i] if i < len(dists0) else None
            score = 1.0 - float(dist) if dist is not None else 0.0
            matches.append(VectorMatch(id=record_id, score=score, metadata=dict(md)))

        self.logger.info(
            "Chroma search complete: returned %d results (requested %d, where=%s)",
            len(matches),
            top_k,
            where,
        )
        return matches

    def fetch_ids(self, ids: Sequence[str]) -> List[str]:
        if not ids:
            return []
        res = self._call(self.collection.get, ids=list(ids), include=[])
        return list(res.get("ids", []) or [])

    def list_ids(self, where: Dict[str, Any]) -> List[str]:
        res = self._call(self.collection.get, where=where, include=[])
        # preserves order while de-duplicating
        return list(dict.fromkeys(res.get("ids", []) or []))

    def delete(self, ids: Sequence[str]) -> None:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return
        self._call(self.collection.delete, ids=unique_ids)
        self.logger.info(
            "Deleted %d records from collection '%s'", len(unique_ids), self.collection_name
        )

    def delete_where(self, where: Dict[str, Any]) -> int:
        """
        Delete all records matching a metadata filter.
        Returns the number of records actually deleted.
        """
        ids = self.list_ids(where)
        if not ids:
            self.logger.info(
                "No records matching %s in collection '%s'", where, self.collection_name
            )
            return 0
        self.delete(ids)
        return len(ids)

    def stats(self) -> IndexStats:
        """
        record_count from count(); dimension from a stored vector when the
        collection is non-empty, else the configured embedding dimension.
        """
        count = int(self._call(self.collection.count))
        dimension = self.dimension
        if count > 0:
            sample = self._call(self.collection.get, limit=1, include=["embeddings"])
            embeddings = sample.get("embeddings")
            if embeddings is not None and len(embeddings) > 0:
                dimension = len(embeddings[0])
        return IndexStats(record_count=count, dimension=dimension)
