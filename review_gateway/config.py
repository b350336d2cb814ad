from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_BATCH_SIZE = 10

TASKS_PATH = Path(__file__).resolve().parent / "configs" / "tasks.yaml"


@dataclass
class TaskSettings:
    temperature: float
    max_tokens: int
    system: Optional[str] = None


@dataclass
class GatewayConfig:
    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    groq_base_url: str = DEFAULT_GROQ_BASE_URL
    google_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    port: int = 8080
    batch_size: int = DEFAULT_BATCH_SIZE
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "GatewayConfig":
        load_dotenv(env_file)
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
            groq_base_url=os.getenv("GROQ_BASE_URL", DEFAULT_GROQ_BASE_URL),
            google_api_key=os.getenv("GOOGLE_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            port=int(os.getenv("PORT", "8080")),
            batch_size=int(os.getenv("CLASSIFY_BATCH_SIZE", str(DEFAULT_BATCH_SIZE))),
            cors_origins=[item.strip() for item in origins.split(",") if item.strip()],
        )


def load_task_settings(path: Path = TASKS_PATH) -> Dict[str, TaskSettings]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    settings: Dict[str, TaskSettings] = {}
    for name, values in raw.items():
        settings[name] = TaskSettings(
            temperature=float(values["temperature"]),
            max_tokens=int(values["max_tokens"]),
            system=values.get("system"),
        )
    return settings
