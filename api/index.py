import logging
from pathlib import Path
import sys

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Ensure local src package is importable in serverless runtime.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cupping_compass.config import AppConfig  # noqa: E402
from cupping_compass.core import (  # noqa: E402
    create_evaluation,
    select_provider,
    serialize_for_narrative,
    toggle_favorite,
)
from cupping_compass.exceptions import (  # noqa: E402
    AuthenticationError,
    ComputationError,
    EvaluationNotFoundError,
    RateLimitError,
    ValidationError,
)
from cupping_compass.i18n import get_translator  # noqa: E402
from cupping_compass.providers.base import BaseNarrativeProvider  # noqa: E402
from cupping_compass.reporting import (  # noqa: E402
    ReportDocument,
    to_pdf_line_items,
    to_radar_series,
    to_report_document,
)
from cupping_compass.rendering import (  # noqa: E402
    content_disposition,
    pdf_filename,
    render_pdf,
    render_radar_png,
)
from cupping_compass.schema import CupEvaluation, Evaluation, Phase, RoastLevel  # noqa: E402
from cupping_compass.storage import EvaluationStore, build_store  # noqa: E402

logger = logging.getLogger(__name__)
CONFIG = AppConfig.from_env()
STORE = build_store(CONFIG.database_url)

app = FastAPI(title="cupping-compass API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CONFIG.allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_config() -> AppConfig:
    return CONFIG


def get_store() -> EvaluationStore:
    return STORE


def get_owner_id(x_user_id: str | None = Header(default=None)) -> str:
    owner_id = (x_user_id or "").strip()
    if not owner_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return owner_id


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


class EvaluationCreateRequest(BaseModel):
    coffee_name: str
    roast_level: RoastLevel = "medium"
    water_temperature: str | None = None
    cups: list[CupEvaluation] = Field(default_factory=list)
    notes: str = ""


class NarrativeResponse(BaseModel):
    report: str
    metadata: dict[str, str] = Field(default_factory=dict)


def _validation_error(exc: ValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail={"field": exc.field, "message": exc.message})


def _not_found(exc: EvaluationNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


def _load(store: EvaluationStore, owner_id: str, evaluation_id: str) -> Evaluation:
    try:
        return store.get(owner_id, evaluation_id)
    except EvaluationNotFoundError as exc:
        raise _not_found(exc) from exc


def _narrative_provider(config: AppConfig, language: str) -> BaseNarrativeProvider:
    return select_provider(
        config.narrative_provider,
        config.gemini_api_key,
        model=config.narrative_model,
        language=language,
    )


@app.post("/evaluations", response_model=Evaluation, status_code=status.HTTP_201_CREATED)
def create(
    body: EvaluationCreateRequest,
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
) -> Evaluation:
    evaluation = Evaluation(owner_id=owner_id, **body.model_dump())
    try:
        return create_evaluation(store, evaluation)
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except ComputationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/evaluations", response_model=list[Evaluation])
def list_evaluations(
    favorites: bool = Query(default=False),
    min_score: float | None = Query(default=None),
    q: str | None = Query(default=None),
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
) -> list[Evaluation]:
    return store.list(owner_id, favorites_only=favorites, min_score=min_score, search=q)


@app.get("/evaluations/{evaluation_id}", response_model=Evaluation)
def get_evaluation(
    evaluation_id: str,
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
) -> Evaluation:
    return _load(store, owner_id, evaluation_id)


@app.delete("/evaluations/{evaluation_id}")
def delete_evaluation(
    evaluation_id: str,
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
) -> dict[str, bool]:
    try:
        store.delete(owner_id, evaluation_id)
    except EvaluationNotFoundError as exc:
        raise _not_found(exc) from exc
    return {"ok": True}


@app.post("/evaluations/{evaluation_id}/favorite", response_model=Evaluation)
def favorite(
    evaluation_id: str,
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
) -> Evaluation:
    try:
        return toggle_favorite(store, owner_id, evaluation_id)
    except EvaluationNotFoundError as exc:
        raise _not_found(exc) from exc


@app.get("/evaluations/{evaluation_id}/report.json", response_model=ReportDocument)
def report_json(
    evaluation_id: str,
    lang: str | None = Query(default=None),
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> ReportDocument:
    evaluation = _load(store, owner_id, evaluation_id)
    try:
        return to_report_document(evaluation, get_translator(lang or config.language))
    except ValidationError as exc:
        raise _validation_error(exc) from exc


@app.get("/evaluations/{evaluation_id}/report.pdf")
def report_pdf(
    evaluation_id: str,
    lang: str | None = Query(default=None),
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> Response:
    evaluation = _load(store, owner_id, evaluation_id)
    try:
        translate = get_translator(lang or config.language)
        body = render_pdf(to_pdf_line_items(evaluation, translate), translate)
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    return Response(
        content=body,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(pdf_filename(evaluation.coffee_name))},
    )


@app.get("/evaluations/{evaluation_id}/radar.png")
def radar_png(
    evaluation_id: str,
    cup: int | None = Query(default=None, ge=1),
    phase: Phase | None = Query(default=None),
    lang: str | None = Query(default=None),
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> Response:
    evaluation = _load(store, owner_id, evaluation_id)
    if cup is not None and cup > len(evaluation.cups):
        raise HTTPException(status_code=404, detail=f"cup not found: {cup}")
    target = evaluation.cups[cup - 1] if cup is not None else evaluation
    try:
        series = to_radar_series(target, phase, include_sweetness=config.include_sweetness_axis)
        body = render_radar_png(
            series,
            get_translator(lang or config.language),
            size=config.radar_size,
            theme=config.theme,
        )
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    return Response(content=body, media_type="image/png")


@app.post("/evaluations/{evaluation_id}/narrative", response_model=NarrativeResponse)
def narrative(
    evaluation_id: str,
    lang: str | None = Query(default=None),
    owner_id: str = Depends(get_owner_id),
    store: EvaluationStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> NarrativeResponse:
    evaluation = _load(store, owner_id, evaluation_id)
    try:
        provider = _narrative_provider(config, lang or config.language)
        text = provider.generate(serialize_for_narrative(evaluation))
        return NarrativeResponse(report=text, metadata=provider.get_generation_metadata())
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except RateLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("narrative generation failed")
        raise HTTPException(status_code=500, detail="internal_error") from exc
