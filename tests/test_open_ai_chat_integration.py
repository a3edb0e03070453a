# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: test_open_ai_chat_integration.py
# -----------------------------------------------------------------------------
import os

import pytest

from chat.OpenAIChat import OpenAIChat
from config.Config import Config


def _chat_cfg_or_skip() -> Config:
    """
    Chat needs only the OPENAI_* vars; backends are forced to memory
    so Chroma / Blob settings are not required here.
    """
    api_key = os.getenv(Config.ENV_VARS["openai_api_key"])
    if not api_key:
        pytest.skip("Missing env var OPENAI_API_KEY")

    return Config(
        openai_api_key=api_key,
        openai_base_url=os.getenv(Config.ENV_VARS["openai_base_url"], ""),
        openai_chat_model=os.getenv(Config.ENV_VARS["openai_chat_model"]) or "gpt-4o-mini",
        embed_api_key=api_key,
        vector_backend="memory",
        text_backend="memory",
    )


@pytest.mark.integration
def test_openai_chat_simple_roundtrip():
    chat = OpenAIChat(cfg=_chat_cfg_or_skip())

    resp = chat.simple_chat(
        user_text="Reply with a single word: OK",
        system_text="You are a test assistant.",
        temperature=0.0,
        max_tokens=5,
    )

    assert isinstance(resp, dict)
    assert resp["answer"].strip().upper().startswith("OK")


@pytest.mark.integration
def test_openai_generate_uses_context():
    chat = OpenAIChat(cfg=_chat_cfg_or_skip())

    answer = chat.generate(
        "Answer ONLY from the document content.",
        "Document Content:\n\nThe sterilization temperature is 134C.\n\n---\n\n"
        "Question: What is the sterilization temperature?\n\nAnswer:",
        temperature=0.0,
        max_tokens=500,
    )

    assert "134" in answer


@pytest.mark.integration
def test_openai_chat_healthcheck():
    chat = OpenAIChat(cfg=_chat_cfg_or_skip())
    assert chat.healthcheck(timeout_s=30) is True
