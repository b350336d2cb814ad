from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List

from review_gateway.adapters.llm_base import LLMAdapter, LLMResponse
from review_gateway.config import TaskSettings

ARTICLES_MARKER = "Artículos a clasificar:"
_LABELS = ["INCLUIR", "EXCLUIR", "DUDA"]


@dataclass
class MockAdapter(LLMAdapter):
    name: str = "mock"

    def complete(self, prompt: str, settings: TaskSettings) -> LLMResponse:
        if ARTICLES_MARKER in prompt:
            payload: Any = self._classify(prompt)
        elif "Escribe una narrativa" in prompt:
            return LLMResponse(raw_text="Síntesis narrativa de prueba generada en modo mock.\n")
        else:
            payload = self._build_payload(prompt)
        return LLMResponse(raw_text="```json\n" + json.dumps(payload, ensure_ascii=False) + "\n```")

    def _classify(self, prompt: str) -> List[Dict]:
        articles = json.loads(prompt.split(ARTICLES_MARKER, 1)[1])
        return [
            {
                "id": article["id"],
                "classification": _LABELS[index % len(_LABELS)],
                "justification": "Clasificación determinista en modo mock.",
                "subtopic": "General",
            }
            for index, article in enumerate(articles)
        ]

    def _build_payload(self, prompt: str) -> Dict:
        if "Genera un protocolo" in prompt:
            return {
                "mainQuestion": "¿Cuál es el efecto de la intervención?",
                "pico": {
                    "population": "Adultos",
                    "intervention": "Intervención",
                    "comparison": "Atención habitual",
                    "outcome": "Resultado principal",
                },
                "subquestions": [f"Subpregunta {n}" for n in range(1, 6)],
                "objectives": "Objetivos de prueba.",
                "coherenceAnalysis": "Análisis de coherencia de prueba.",
                "methodologicalJustification": "Justificación de prueba.",
                "inclusionCriteria": ["Ensayos controlados"],
                "exclusionCriteria": ["Reportes de caso"],
            }
        if "Resume el siguiente texto" in prompt:
            return {
                "sample": {"size": 120, "description": "Muestra de prueba"},
                "methodology": {"design": "ECA", "duration": "12 semanas"},
                "intervention": {"description": "Intervención de prueba", "tools": []},
                "outcomes": {"primary": "Resultado", "results": "Sin diferencias"},
                "limitations": ["Datos simulados"],
            }
        if "Genera el manuscrito" in prompt:
            return {
                "abstract": "Resumen.",
                "introduction": "Introducción.",
                "methods": "Métodos.",
                "results": "Resultados.",
                "discussion": "Discusión.",
                "conclusions": "Conclusiones.",
                "references": [],
            }
        if "Objetivo del paso 1" in prompt:
            return {"question": "Pregunta de prueba", "keywordMatrix": []}
        if "Objetivo del paso 2" in prompt:
            return {"question": "Pregunta de prueba", "subquestionStrategies": [], "recommendations": []}
        return {
            "question": "Pregunta de prueba",
            "keywordMatrix": [],
            "subquestionStrategies": [],
            "recommendations": [],
        }
