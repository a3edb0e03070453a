# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openai import OpenAI

from settings import GENERATION_TIMEOUT_SECONDS
from utility.errors import GenerationError
from utility.logging_utils import get_class_logger
from utility.timeouts import TimeoutRunner

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}


@dataclass
class OpenAIChat:
    """
        Chat wrapper for any OpenAI-compatible chat completions endpoint
        (OpenAI direct, Groq, ... selected by cfg.openai_base_url).

        Expected Config fields:
          cfg.openai_api_key: str
          cfg.openai_base_url: str ("" -> OpenAI default)
          cfg.openai_chat_model: str  (default model, overridable per call)
    """

    cfg: Any
    timeout_s: float = GENERATION_TIMEOUT_SECONDS
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self._runner = TimeoutRunner(name="docqa-chat")

        if not getattr(self.cfg, "openai_api_key", None):
            raise ValueError("Config is missing openai_api_key")

        self.model = getattr(self.cfg, "openai_chat_model", None)
        if not self.model:
            raise ValueError("Config missing openai_chat_model.")

        self.client = OpenAI(
            api_key=self.cfg.openai_api_key,
            base_url=getattr(self.cfg, "openai_base_url", None) or None,
            timeout=self.timeout_s,
            max_retries=1,
        )

        self.logger.info("OpenAIChat initialised (model=%s, timeout=%.1fs)", self.model, self.timeout_s)

    # Standard chat call
    def chat(
            self,
            messages: List[Message],
            temperature: float = 0.0,
            max_tokens: int = 512,
            model: Optional[str] = None,
            top_p: float = 1.0,
            extra_params: Optional[Dict[str, Any]] = None,
            timeout_s: Optional[float] = None,
    ) -> Any:
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": top_p,
        }
        if extra_params:
            params.update(extra_params)

        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s",
            params["model"], temperature, max_tokens
        )

        # SDK timeout bounds each HTTP attempt; the race bounds the call as a whole
        resp = self._runner.call(self.client.chat.completions.create, timeout_s or self.timeout_s, **params)

        self.logger.debug("Raw ChatCompletion response: %r", resp)
        return resp

    def generate(
            self,
            system_instruction: str,
            user_prompt: str,
            *,
            model: Optional[str] = None,
            temperature: float = 0.7,
            max_tokens: int = 2000,
    ) -> str:
        """
        Single-turn generation used by the query flow.
        Any failure, timeout included, surfaces as GenerationError.
        """
        messages: List[Message] = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": user_prompt},
        ]
        try:
            resp = self.chat(messages, temperature=temperature, max_tokens=max_tokens, model=model)
            content = resp.choices[0].message.content or ""
        except Exception as e:
            self.logger.error("Answer generation failed (model=%s): %s", model or self.model, e, exc_info=True)
            raise GenerationError(f"Answer generation failed: {e}") from e

        answer = content.strip()
        if not answer:
            raise GenerationError("Model returned an empty answer")

        self.logger.info(
            "Chat answer generated (model=%s, answer_chars=%d)", getattr(resp, "model", None), len(answer)
        )
        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))
        return answer

    # Convenience helper functions
    def simple_chat(
            self,
            user_text: str,
            system_text: Optional[str] = None,
            **kwargs: Any,
    ) -> dict:
        messages: List[Message] = []
        if system_text:
            messages.append({"role": "system", "content": system_text})
        messages.append({"role": "user", "content": user_text})

        resp = self.chat(messages, **kwargs)

        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise RuntimeError(f"Unexpected chat response format: {e}")

        return {
            "answer": content,
            "usage": getattr(resp, "usage", None),
            "model": getattr(resp, "model", None),
        }

    def healthcheck(self, timeout_s: Optional[float] = None) -> bool:
        try:
            self.simple_chat("ping", max_tokens=5, temperature=0.0, timeout_s=timeout_s)
            return True
        except Exception as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False
