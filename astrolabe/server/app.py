# server/app.py
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .errors import PlanError
from .planner import ReflectionPlanService, build_service
from .schemas import ErrorOut, PlanIn, PlanOut

app = FastAPI(title="ASTROLABE Reflection Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


# registered after CORSMiddleware, so it runs first
@app.middleware("http")
async def preflight(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=PREFLIGHT_HEADERS)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Dependencies – input check first, then one provider client per process
# ---------------------------------------------------------------------------


def checked_payload(payload: PlanIn) -> PlanIn:
    """Reject blank fields before the provider client is touched."""
    ReflectionPlanService.validate(payload)
    return payload


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    try:
        return load_settings()
    except ValueError as e:
        raise PlanError(str(e)) from e


@lru_cache(maxsize=1)
def get_service() -> ReflectionPlanService:
    settings = get_settings()
    try:
        return build_service(settings)
    except PlanError:
        raise
    except Exception as e:
        print("[astrolabe] Could not build provider client:", repr(e))
        raise PlanError(str(e) or "Provider request failed") from e


# a bad ASTROLABE_VARIANT stops the server here
@app.on_event("startup")
def startup() -> None:
    settings = get_settings()
    print("[astrolabe] Serving variant:", settings.variant.name)


# ---------------------------------------------------------------------------
# Error bodies: always { "error": ... }
# ---------------------------------------------------------------------------


@app.exception_handler(PlanError)
async def plan_error_handler(request: Request, exc: PlanError) -> JSONResponse:
    if exc.status_code >= 500:
        print(f"[astrolabe] Error in {request.url.path}:", repr(exc))
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "ok": True,
        "ts": datetime.now(timezone.utc).isoformat(),
        "variant": settings.variant.name,
    }


# ---------------------------------------------------------------------------
# /api/astrolabe – nine-step reflection plan
# ---------------------------------------------------------------------------


@app.post(
    "/api/astrolabe",
    response_model=PlanOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def astrolabe(
    payload: PlanIn = Depends(checked_payload),
    service: ReflectionPlanService = Depends(get_service),
) -> PlanOut:
    try:
        return service.generate(payload)
    except PlanError:
        raise
    except Exception as e:
        print("[astrolabe] Provider call failed:", repr(e))
        raise PlanError(str(e) or "Provider request failed") from e
