# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass, fields
from typing import List

from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)


@dataclass(frozen=True)
class Config:
    # OpenAI-compatible chat endpoint (OpenAI, Groq, ...)
    openai_api_key: str
    openai_base_url: str = ""
    openai_chat_model: str = "gpt-4o-mini"

    # Embeddings (OpenAI direct, or Azure OpenAI when an endpoint is given)
    embed_api_key: str = ""
    embed_model: str = "text-embedding-3-small"
    embed_dimension: int = 384
    openai_azure_endpoint: str = ""
    openai_azure_api_version: str = "2024-10-21"

    # Vector index: "chroma" (Chroma Cloud) or "memory"
    vector_backend: str = "chroma"
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""
    chroma_collection: str = "docqa-chunks"

    # Extracted-text store: "blob" (Azure Blob) or "memory"
    text_backend: str = "blob"
    storage_account: str = ""
    storage_key: str = ""
    text_container: str = "docqa-text"

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",  # e.g. https://api.groq.com/openai/v1
        "openai_chat_model": "OPENAI_CHAT_MODEL",

        "embed_api_key": "EMBED_API_KEY",  # falls back to OPENAI_API_KEY
        "embed_model": "EMBED_MODEL",
        "embed_dimension": "EMBED_DIMENSION",
        "openai_azure_endpoint": "AZURE_OPENAI_ENDPOINT",
        "openai_azure_api_version": "AZURE_OPENAI_API_VERSION",

        "vector_backend": "DOCQA_VECTOR_BACKEND",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "chroma_collection": "CHROMA_COLLECTION",

        "text_backend": "DOCQA_TEXT_BACKEND",
        "storage_account": "AZURE_STORAGE_ACCOUNT",
        "storage_key": "AZURE_STORAGE_KEY",
        "text_container": "DOCQA_TEXT_CONTAINER",
    }

    # Convenient *groups* for use in tests / health checks
    CHROMA_ENV_VARS = (
        "CHROMA_API_KEY",
        "CHROMA_TENANT",
        "CHROMA_DATABASE",
    )

    STORAGE_ENV_VARS = (
        "AZURE_STORAGE_ACCOUNT",
        "AZURE_STORAGE_KEY",
    )

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables (unset vars keep field defaults)."""
        kwargs = {}
        for f in fields(Config):
            env_name = Config.ENV_VARS[f.name]
            raw = (os.getenv(env_name) or "").strip()
            if not raw:
                continue
            if f.type in (int, "int"):
                try:
                    kwargs[f.name] = int(raw)
                except ValueError as e:
                    raise ValueError(f"Env var {env_name} must be an int, got {raw!r}") from e
            else:
                kwargs[f.name] = raw

        kwargs.setdefault("openai_api_key", "")
        if not kwargs.get("embed_api_key"):
            kwargs["embed_api_key"] = kwargs["openai_api_key"]
        return Config(**kwargs)

    def required_fields(self) -> List[str]:
        required = ["openai_api_key", "openai_chat_model", "embed_api_key", "embed_model"]
        if self.vector_backend == "chroma":
            required += ["chroma_api_key", "chroma_tenant", "chroma_database", "chroma_collection"]
        if self.text_backend == "blob":
            required += ["storage_account", "storage_key", "text_container"]
        return required

    def __post_init__(self):
        """
        Fail fast if any required config is missing or out of range.
        Which fields are required depends on the selected backends.
        """
        if self.vector_backend not in ("chroma", "memory"):
            raise ValueError(f"{self.ENV_VARS['vector_backend']} must be 'chroma' or 'memory', got {self.vector_backend!r}")
        if self.text_backend not in ("blob", "memory"):
            raise ValueError(f"{self.ENV_VARS['text_backend']} must be 'blob' or 'memory', got {self.text_backend!r}")
        if self.embed_dimension <= 0:
            raise ValueError(f"{self.ENV_VARS['embed_dimension']} must be > 0, got {self.embed_dimension}")

        missing_fields = [f for f in self.required_fields() if not getattr(self, f)]

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url or "https://api.openai.com/v1",
            "openai_chat_model": self.openai_chat_model,
            "embed_model": self.embed_model,
            "embed_dimension": self.embed_dimension,
            "openai_azure_endpoint": self.openai_azure_endpoint or None,
            "vector_backend": self.vector_backend,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "chroma_collection": self.chroma_collection,
            "text_backend": self.text_backend,
            "storage_account": self.storage_account,
            "text_container": self.text_container,
        }
