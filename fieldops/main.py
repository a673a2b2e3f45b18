from __future__ import annotations

import time
import uuid
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fieldops.api.router import api_router
from fieldops.core.settings import settings
from fieldops.core.logging import setup_logging
from fieldops.core.errors import error_payload, AppHTTPException
from fieldops.core.request_id import REQUEST_ID_HEADER, set_request_id, get_request_id, ensure_request_id

"""
Application FastAPI (entrypoint).

Rôle (fonctionnel) :
- Configure l’application (settings, CORS, middleware, routers).
- Centralise l’observabilité :
  - request_id propagé (X-Request-Id)
  - logs structurés JSON (timing, status, client_ip)
  - seuil de “slow request”
- Uniformise les erreurs côté client (format error_payload), y compris les conflits
  d’allocation de numéros (409 REFERENCE_CONFLICT).

Ce fichier ne contient pas de logique métier :
- La logique métier est dans fieldops.services
- Les routes sont dans fieldops.api
- Les composants transverses sont dans fieldops.core
"""


class UTF8JSONResponse(JSONResponse):
    """Réponse JSON avec charset UTF-8 explicite (libellés accentués)."""
    media_type = "application/json; charset=utf-8"


setup_logging(settings.LOG_LEVEL)

# logger principal projet
log = logging.getLogger("fieldops")

# logger dédié observabilité HTTP (séparé du métier)
http_log = logging.getLogger("fieldops.http")

SLOW_MS = settings.SLOW_REQUEST_MS


def _split_origins(value: str) -> list[str]:
    """Parse une liste d’origines CORS depuis une string 'a,b,c'."""
    if not value:
        return []
    return [o.strip() for o in value.split(",") if o.strip()]


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid.uuid4())


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    default_response_class=UTF8JSONResponse,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_split_origins(settings.CORS_ORIGINS),
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Actor",
        REQUEST_ID_HEADER,
    ],
)

app.include_router(api_router)


# --- Middleware observabilité : request_id + timing + logs structurés ---
@app.middleware("http")
async def request_observability(request: Request, call_next):
    rid = ensure_request_id(request.headers.get(REQUEST_ID_HEADER))
    request.state.request_id = rid

    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)

        if response is not None:
            response.headers[REQUEST_ID_HEADER] = rid

        # Slow request => WARNING, sinon INFO
        level = logging.WARNING if duration_ms >= SLOW_MS else logging.INFO
        http_log.log(
            level,
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": getattr(response, "status_code", None),
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )

        set_request_id(None)


# --- Error handlers : format standard, pas de stacktrace côté client ---
@app.exception_handler(AppHTTPException)
async def app_http_exception_handler(request: Request, exc: AppHTTPException):
    """Erreurs applicatives (AppHTTPException) -> payload standard."""
    detail = exc.detail if isinstance(exc.detail, dict) else {}

    code = str(detail.get("code", "HTTP_ERROR"))
    message = str(detail.get("message", "Erreur HTTP"))
    details = detail.get("details", None)

    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_payload(
            code=code, message=message, status=exc.status_code, request_id=_request_id(request), details=details
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Erreurs HTTP natives (404 route inconnue, 405…) -> payload standard."""
    if isinstance(exc.detail, dict):
        code = str(exc.detail.get("code", "HTTP_ERROR"))
        message = str(exc.detail.get("message", "Erreur HTTP"))
        details = exc.detail.get("details", None)
    else:
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        message = str(exc.detail)
        details = None

    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_payload(
            code=code, message=message, status=exc.status_code, request_id=_request_id(request), details=details
        ),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Erreurs de validation Pydantic -> 422 + details=exc.errors()."""
    return UTF8JSONResponse(
        status_code=422,
        content=error_payload(
            code="VALIDATION_ERROR",
            message="Requête invalide",
            status=422,
            request_id=_request_id(request),
            details=jsonable_errors(exc),
        ),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx peut contenir l’exception levée par un validateur (non sérialisable)
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Fallback : toute exception non gérée -> 500 + log serveur."""
    log.exception("Unhandled error: %s", exc)

    return UTF8JSONResponse(
        status_code=500,
        content=error_payload(
            code="INTERNAL_ERROR",
            message="Erreur interne du serveur",
            status=500,
            request_id=_request_id(request),
        ),
    )
