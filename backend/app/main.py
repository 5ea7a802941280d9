import logging
import os

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import load_settings
from app.schemas.forms import FormDefinition, FormSummary
from app.schemas.responses import (
    FormResponseListResponse,
    FormSubmitRequest,
    FormSubmitResponse,
    LeaderboardResponse,
)
from app.services.form_catalog import FormServiceError
from app.services.provider_factory import ServiceContainer, build_services
from app.services.submission_service import load_leaderboard, submit_form_response


def _load_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    if raw:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return ["http://localhost:5173", "http://127.0.0.1:5173"]


app = FastAPI(docs_url="/api-docs", redoc_url="/api-redoc")
app.add_middleware(
    CORSMiddleware,
    allow_origins=_load_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
settings = load_settings()
services = build_services(settings)
logger = logging.getLogger(__name__)


@app.on_event("startup")
def init_storage_on_startup():
    services.init_storage()


@app.on_event("shutdown")
async def close_stores_on_shutdown():
    await services.close()


def get_services() -> ServiceContainer:
    return services


def _error_response(exc: FormServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.status_code, "message": exc.message, "details": exc.details},
    )


def require_admin(
    x_admin_passcode: str | None = Header(default=None),
    container: ServiceContainer = Depends(get_services),
) -> None:
    if (x_admin_passcode or "").strip() != container.settings.admin_passcode:
        raise HTTPException(status_code=401, detail="Invalid admin passcode")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/forms", response_model=list[FormSummary])
def list_forms(container: ServiceContainer = Depends(get_services)):
    return container.catalog.list_summaries()


@app.get("/forms/{form_id}", response_model=FormDefinition)
def get_form(form_id: str, container: ServiceContainer = Depends(get_services)):
    form = container.catalog.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@app.post("/forms/{form_id}/responses", response_model=FormSubmitResponse)
async def submit_response(
    form_id: str,
    request: FormSubmitRequest,
    container: ServiceContainer = Depends(get_services),
):
    try:
        return await submit_form_response(container, form_id, request.answers)
    except FormServiceError as exc:
        if exc.status_code >= 500:
            logger.warning("Submission for form %s failed: %s", form_id, exc.details)
        return _error_response(exc)


@app.get("/forms/{form_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(form_id: str, container: ServiceContainer = Depends(get_services)):
    form = container.catalog.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return await load_leaderboard(container, form)


@app.get(
    "/admin/forms/{form_id}/responses",
    response_model=FormResponseListResponse,
    dependencies=[Depends(require_admin)],
)
async def list_responses(form_id: str, container: ServiceContainer = Depends(get_services)):
    try:
        items = await container.responses.fetch_all(form_id)
    except FormServiceError as exc:
        return _error_response(exc)
    return {"form_id": form_id, "total": len(items), "items": items}
