# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: reindex_all.py
#   Re-index every document in the text store against the current embedding
#   model. Run from the project root: python -m scripts.reindex_all
# -----------------------------------------------------------------------------
from typing import Any, Dict

from api.AppContainer import AppContainer
from config.Config import Config
from services.DocDocumentService import STATUS_INDEXED
from utility.logging_utils import get_logger

logger = get_logger("scripts.reindex_all")


def reindex_all(container: AppContainer) -> Dict[str, Dict[str, Any]]:
    results = container.document_service.reindex_all()

    pending = [doc_id for doc_id, r in results.items() if r["status"] != STATUS_INDEXED]
    logger.info("Re-index finished: %d documents, %d pending", len(results), len(pending))
    for doc_id in pending:
        logger.warning("  %s: %s", doc_id, results[doc_id].get("error"))
    return results


if __name__ == "__main__":
    cfg = Config.from_env()
    results = reindex_all(AppContainer(cfg))

    print("\n=== Re-index Results ===")
    for doc_id, r in results.items():
        print(f"{doc_id}: {r['status']} ({len(r['record_ids'])} records, "
              f"{len(r['deleted_ids'])} stale removed, {len(r['stale_ids'])} stale left)")

    raise SystemExit(0 if all(r["status"] == STATUS_INDEXED for r in results.values()) else 1)
