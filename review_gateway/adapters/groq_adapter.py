from __future__ import annotations

import logging

from openai import APIError, APIStatusError, OpenAI

from review_gateway.adapters.llm_base import LLMAdapter, LLMResponse
from review_gateway.config import GatewayConfig, TaskSettings
from review_gateway.errors import MissingCredential, UpstreamFailure

logger = logging.getLogger(__name__)


class GroqAdapter(LLMAdapter):
    """Chat completions against Groq through its OpenAI-compatible endpoint."""

    name = "groq"

    def __init__(self, config: GatewayConfig) -> None:
        if not config.groq_api_key:
            raise MissingCredential("Missing GROQ_API_KEY env var")
        self.model = config.groq_model
        self.client = OpenAI(api_key=config.groq_api_key, base_url=config.groq_base_url)

    def complete(self, prompt: str, settings: TaskSettings) -> LLMResponse:
        messages = []
        if settings.system:
            messages.append({"role": "system", "content": settings.system})
        messages.append({"role": "user", "content": prompt})
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
            )
        except APIStatusError as exc:
            raise UpstreamFailure(
                f"Groq API error ({exc.status_code})", details=exc.response.text or exc.message
            ) from exc
        except APIError as exc:
            raise UpstreamFailure("Groq request failed", details=exc.message) from exc

        content = response.choices[0].message.content if response.choices else None
        usage = getattr(response, "usage", None)
        if usage:
            usage_payload = {
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
                "total_tokens": getattr(usage, "total_tokens", None),
            }
            logger.info(
                "[groq] model=%s prompt_tokens=%s completion_tokens=%s total_tokens=%s",
                self.model,
                usage_payload["prompt_tokens"],
                usage_payload["completion_tokens"],
                usage_payload["total_tokens"],
            )
        else:
            usage_payload = None
            logger.info("[groq] usage not provided by SDK")
        return LLMResponse(raw_text=content or "", usage=usage_payload)
