from __future__ import annotations

import pytest

from review_gateway.adapters.factory import build_adapter
from review_gateway.adapters.gemini_adapter import GeminiAdapter
from review_gateway.adapters.groq_adapter import GroqAdapter
from review_gateway.adapters.mock_adapter import MockAdapter
from review_gateway.config import DEFAULT_GROQ_MODEL, GatewayConfig, load_task_settings
from review_gateway.errors import MissingCredential


def test_from_env_reads_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
    monkeypatch.setenv("CLASSIFY_BATCH_SIZE", "5")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.delenv("GROQ_MODEL", raising=False)

    config = GatewayConfig.from_env(tmp_path / "missing.env")

    assert config.groq_api_key == "gsk-test"
    assert config.groq_model == DEFAULT_GROQ_MODEL
    assert config.gemini_model == "gemini-test"
    assert config.batch_size == 5
    assert config.cors_origins == ["http://a.test", "http://b.test"]


def test_from_env_loads_dotenv_file(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("GOOGLE_API_KEY=from-file\n", encoding="utf-8")

    config = GatewayConfig.from_env(env_file)

    assert config.google_api_key == "from-file"


def test_non_positive_batch_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        GatewayConfig(batch_size=0)


def test_task_settings_cover_every_task() -> None:
    settings = load_task_settings()
    assert set(settings) == {
        "protocol",
        "extraction",
        "narrative",
        "manuscript",
        "search_strategy_derivation",
        "search_strategy_subquestions",
        "search_strategy_full",
        "classify",
    }
    assert settings["classify"].temperature == 0.2
    assert settings["classify"].max_tokens == 2048
    assert settings["classify"].system is None
    assert settings["manuscript"].max_tokens == 3072


@pytest.mark.parametrize("adapter_cls", [GroqAdapter, GeminiAdapter])
def test_missing_key_fails_at_construction(adapter_cls) -> None:
    with pytest.raises(MissingCredential):
        adapter_cls(GatewayConfig())


def test_factory_selects_adapters() -> None:
    config = GatewayConfig(groq_api_key="gsk-test", google_api_key="g-test")
    assert isinstance(build_adapter("gemini", "mock", GatewayConfig()), MockAdapter)
    assert isinstance(build_adapter("groq", "live", config), GroqAdapter)
    assert isinstance(build_adapter("gemini", "live", config), GeminiAdapter)
    with pytest.raises(ValueError):
        build_adapter("groq", "offline", config)
    with pytest.raises(ValueError):
        build_adapter("openai", "live", config)
