# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_config.py
# -----------------------------------------------------------------------------
import pytest

from config.Config import Config


@pytest.fixture
def clean_env(monkeypatch):
    for env_name in Config.ENV_VARS.values():
        monkeypatch.delenv(env_name, raising=False)
    return monkeypatch


def test_from_env_memory_backends(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("DOCQA_VECTOR_BACKEND", "memory")
    clean_env.setenv("DOCQA_TEXT_BACKEND", "memory")
    clean_env.setenv("EMBED_DIMENSION", "1536")

    cfg = Config.from_env()

    assert cfg.embed_dimension == 1536
    assert cfg.openai_chat_model == "gpt-4o-mini"
    # embeddings reuse the chat key unless a separate one is given
    assert cfg.embed_api_key == "sk-test"


def test_missing_chroma_and_storage_vars_fail_fast(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")

    with pytest.raises(ValueError) as exc:
        Config.from_env()

    msg = str(exc.value)
    for env_name in Config.CHROMA_ENV_VARS + Config.STORAGE_ENV_VARS:
        assert env_name in msg


def test_missing_api_key_fails_fast(clean_env):
    clean_env.setenv("DOCQA_VECTOR_BACKEND", "memory")
    clean_env.setenv("DOCQA_TEXT_BACKEND", "memory")

    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        Config.from_env()


def test_bad_int_env_var(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("EMBED_DIMENSION", "large")

    with pytest.raises(ValueError, match="EMBED_DIMENSION"):
        Config.from_env()


@pytest.mark.parametrize("kwargs", [
    {"vector_backend": "pinecone"},
    {"text_backend": "s3"},
    {"embed_dimension": 0},
])
def test_invalid_values_rejected(kwargs):
    base = dict(openai_api_key="k", embed_api_key="k", vector_backend="memory", text_backend="memory")
    base.update(kwargs)
    with pytest.raises(ValueError):
        Config(**base)


def test_summary_has_no_secrets(memory_config):
    summary = memory_config.summary()
    assert "test-key" not in str(summary)
    assert summary["vector_backend"] == "memory"
