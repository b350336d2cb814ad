from __future__ import annotations

import logging
from typing import List

import httpx
from google import genai
from google.genai import errors, types

from review_gateway.adapters.llm_base import LLMAdapter, LLMResponse
from review_gateway.config import GatewayConfig, TaskSettings
from review_gateway.errors import MissingCredential, UpstreamFailure

logger = logging.getLogger(__name__)


class GeminiAdapter(LLMAdapter):
    name = "gemini"

    def __init__(self, config: GatewayConfig) -> None:
        if not config.google_api_key:
            raise MissingCredential("Missing GOOGLE_API_KEY env var")
        self.model = config.gemini_model
        self.client = genai.Client(api_key=config.google_api_key)

    def complete(self, prompt: str, settings: TaskSettings) -> LLMResponse:
        logger.info("[gemini] model=%s", self.model)
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=settings.temperature,
                    max_output_tokens=settings.max_tokens,
                    system_instruction=settings.system,
                ),
            )
        except errors.APIError as exc:
            raise UpstreamFailure(
                f"Gemini API error ({exc.code})", details=exc.message or str(exc)
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure("Gemini request failed", details=str(exc) or type(exc).__name__) from exc
        return LLMResponse(raw_text=self._candidate_text(response))

    def _candidate_text(self, response: types.GenerateContentResponse) -> str:
        texts: List[str] = []
        for candidate in response.candidates or []:
            content = candidate.content
            if content is None:
                continue
            joined = "\n".join(part.text or "" for part in content.parts or [])
            if joined:
                texts.append(joined)
        return "\n".join(texts)
