from __future__ import annotations

from review_gateway.adapters.gemini_adapter import GeminiAdapter
from review_gateway.adapters.groq_adapter import GroqAdapter
from review_gateway.adapters.llm_base import LLMAdapter
from review_gateway.adapters.mock_adapter import MockAdapter
from review_gateway.config import GatewayConfig

MODES = ("mock", "live")


def build_adapter(provider: str, mode: str, config: GatewayConfig) -> LLMAdapter:
    if mode not in MODES:
        raise ValueError(f"Unsupported mode: {mode}")
    if mode == "mock":
        return MockAdapter()
    if provider == "gemini":
        return GeminiAdapter(config)
    if provider == "groq":
        return GroqAdapter(config)
    raise ValueError(f"Unsupported provider: {provider}")
