"""HTTP gateway exposing the literature-review tasks."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from review_gateway.adapters.factory import build_adapter
from review_gateway.batching import Criteria, WorkItem
from review_gateway.config import GatewayConfig, load_task_settings
from review_gateway.errors import GatewayError, error_details
from review_gateway.pipeline_classify import ClassificationPipeline
from review_gateway.pipeline_tasks import TaskPipeline
from review_gateway.utils.time import epoch_millis

logger = logging.getLogger(__name__)


class ProtocolRequest(BaseModel):
    topic: Optional[str] = None


class ExtractionRequest(BaseModel):
    pdf_text: Optional[str] = Field(None, alias="pdfText")


class NarrativeRequest(BaseModel):
    themes: Any = None
    stats: Any = None


class ManuscriptRequest(BaseModel):
    project_id: Optional[str] = Field(None, alias="projectId")
    aggregated: Any = None


class SearchStrategyRequest(BaseModel):
    topic: Optional[str] = None
    phase1: Any = None
    sources: Optional[List[str]] = None
    step: Optional[str] = None
    keyword_matrix: Any = Field(None, alias="keywordMatrix")


class CriteriaIn(BaseModel):
    main_question: Optional[str] = Field(None, alias="mainQuestion")
    inclusion_criteria: Optional[List[str]] = Field(None, alias="inclusionCriteria")
    exclusion_criteria: Optional[List[str]] = Field(None, alias="exclusionCriteria")


class ArticleIn(BaseModel):
    id: Union[str, int]
    title: Optional[str] = None
    abstract: Optional[str] = None


class ClassifyRequest(BaseModel):
    criteria: Optional[CriteriaIn] = None
    articles: Optional[List[ArticleIn]] = None


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _failure(route: str, message: str, exc: GatewayError) -> JSONResponse:
    details = error_details(exc)
    logger.error("%s %s: %s", route, exc.message, details)
    return JSONResponse(status_code=500, content={"error": message, "details": details})


def create_app(config: Optional[GatewayConfig] = None, mode: str = "live") -> FastAPI:
    config = config or GatewayConfig.from_env()
    settings = load_task_settings()

    app = FastAPI(title="Review Gateway", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def tasks() -> TaskPipeline:
        return TaskPipeline(build_adapter("groq", mode, config), settings)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Not found", "path": request.url.path})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        details = error_details(exc)
        logger.error("%s unhandled %s: %s", request.url.path, type(exc).__name__, details)
        return JSONResponse(status_code=500, content={"error": "Request failed", "details": details})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid payload", "details": str(exc.errors())})

    @app.get("/health")
    def health():
        return {"ok": True, "timestamp": epoch_millis()}

    @app.post("/groq/protocol")
    def protocol(body: ProtocolRequest):
        if not body.topic:
            return _bad_request("Missing topic")
        try:
            return tasks().protocol(body.topic)
        except GatewayError as exc:
            return _failure("/groq/protocol", "Groq protocol generation failed", exc)

    @app.post("/groq/extraction")
    def extraction(body: ExtractionRequest):
        if not body.pdf_text:
            return _bad_request("Missing pdfText")
        try:
            return tasks().extraction(body.pdf_text)
        except GatewayError as exc:
            return _failure("/groq/extraction", "Groq extraction failed", exc)

    @app.post("/groq/narrative")
    def narrative(body: NarrativeRequest):
        if body.themes is None or body.stats is None:
            return _bad_request("Missing payload")
        try:
            return tasks().narrative(body.themes, body.stats)
        except GatewayError as exc:
            return _failure("/groq/narrative", "Groq narrative failed", exc)

    @app.post("/groq/manuscript")
    def manuscript(body: ManuscriptRequest):
        if not body.project_id or body.aggregated is None:
            return _bad_request("Missing project data")
        try:
            return tasks().manuscript(body.project_id, body.aggregated)
        except GatewayError as exc:
            return _failure("/groq/manuscript", "Groq manuscript failed", exc)

    @app.post("/groq/search-strategy")
    def search_strategy(body: SearchStrategyRequest):
        if not body.topic or body.phase1 is None:
            return _bad_request("Missing topic or phase1 data")
        try:
            return tasks().search_strategy(
                body.topic, body.phase1, body.sources, body.step, body.keyword_matrix
            )
        except GatewayError as exc:
            return _failure("/groq/search-strategy", "Groq search strategy failed", exc)

    @app.post("/gemini/classify")
    def classify(body: ClassifyRequest):
        if body.criteria is None or not body.articles:
            return _bad_request("Missing criteria or articles")
        criteria = Criteria(
            main_question=body.criteria.main_question or "",
            inclusion=body.criteria.inclusion_criteria or [],
            exclusion=body.criteria.exclusion_criteria or [],
        )
        items = [
            WorkItem(id=article.id, title=article.title or "", abstract=article.abstract or "")
            for article in body.articles
        ]
        try:
            pipeline = ClassificationPipeline(
                build_adapter("gemini", mode, config), settings["classify"], config.batch_size
            )
            records = pipeline.run(criteria, items)
        except GatewayError as exc:
            return _failure("/gemini/classify", "Gemini classification failed", exc)
        return {"results": [record.to_dict() for record in records]}

    return app
