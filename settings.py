# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Updated: 2026-02-09
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import Any, Dict


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Indexing
# -----------------------------------------------------------------------------
# Index-time chunks are finer than the generation-time chunk_size setting (1000)
INDEX_CHUNK_SIZE = _env_int("DOCQA_INDEX_CHUNK_SIZE", 500)
INDEX_CHUNK_OVERLAP = _env_int("DOCQA_INDEX_CHUNK_OVERLAP", 100)

UPSERT_BATCH_SIZE = _env_int("DOCQA_UPSERT_BATCH_SIZE", 50)

# Settle delays for the eventually consistent vector index
UPSERT_SETTLE_SECONDS = _env_float("DOCQA_UPSERT_SETTLE_SECONDS", 1.0)
FINAL_SETTLE_SECONDS = _env_float("DOCQA_FINAL_SETTLE_SECONDS", 3.0)

VERIFY_AFTER_UPSERT = _env_bool("DOCQA_VERIFY_AFTER_UPSERT", True)


# -----------------------------------------------------------------------------
# Retrieval
# -----------------------------------------------------------------------------
# Minimum number of candidates fetched from the index per query
CANDIDATE_FLOOR = _env_int("DOCQA_CANDIDATE_FLOOR", 10)

SOURCE_PREVIEW_CHARS = _env_int("DOCQA_SOURCE_PREVIEW_CHARS", 300)
CONTEXT_DELIMITER = "\n\n---\n\n"


# -----------------------------------------------------------------------------
# Query defaults (QuerySettings)
# -----------------------------------------------------------------------------
QUERY_DEFAULTS: Dict[str, Any] = {
    "top_k": _env_int("DOCQA_DEFAULT_TOP_K", 3),
    "chunk_size": _env_int("DOCQA_DEFAULT_CHUNK_SIZE", 1000),
    "temperature": _env_float("DOCQA_DEFAULT_TEMPERATURE", 0.7),
    "max_tokens": _env_int("DOCQA_DEFAULT_MAX_TOKENS", 2000),
}

NO_INFORMATION_MESSAGE = _env(
    "DOCQA_NO_INFORMATION_MESSAGE",
    "No information found in your documents to answer this question.",
)
DEGRADED_ANSWER_CHARS = _env_int("DOCQA_DEGRADED_ANSWER_CHARS", 500)


# -----------------------------------------------------------------------------
# Timeouts (seconds)
# -----------------------------------------------------------------------------
EMBED_TIMEOUT_SECONDS = _env_float("DOCQA_EMBED_TIMEOUT_SECONDS", 30.0)
VECTOR_TIMEOUT_SECONDS = _env_float("DOCQA_VECTOR_TIMEOUT_SECONDS", 30.0)
GENERATION_TIMEOUT_SECONDS = _env_float("DOCQA_GENERATION_TIMEOUT_SECONDS", 60.0)
HEALTH_TIMEOUT_SECONDS = _env_float("DOCQA_HEALTH_TIMEOUT_SECONDS", 5.0)
# Worker threads per client for timed calls; a timed out call holds its worker until the SDK returns
CALL_POOL_WORKERS = _env_int("DOCQA_CALL_POOL_WORKERS", 8)


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if INDEX_CHUNK_OVERLAP >= INDEX_CHUNK_SIZE:
    raise RuntimeError(
        f"DOCQA_INDEX_CHUNK_OVERLAP ({INDEX_CHUNK_OVERLAP}) must be < DOCQA_INDEX_CHUNK_SIZE ({INDEX_CHUNK_SIZE})"
    )

if UPSERT_BATCH_SIZE < 1:
    raise RuntimeError("DOCQA_UPSERT_BATCH_SIZE must be >= 1")

if CALL_POOL_WORKERS < 1:
    raise RuntimeError("DOCQA_CALL_POOL_WORKERS must be >= 1")
