"""
Gestionnaires d'exceptions de l'API.
- HTTPException -> {"error": detail} (ou le dict detail tel quel, ex: 429 avec retryAfter).
- RequestValidationError (paramètres FastAPI invalides) -> 400 {"error": "Invalid request"}.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.utils.correlation import get_correlation_id

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_as_json(request: Request, exc: StarletteHTTPException):
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        if exc.status_code == 400:
            logger.info("[%s] %s %s rejected: %s", get_correlation_id(request), request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_as_json(request: Request, exc: RequestValidationError):
        logger.info("[%s] %s %s invalid request: %s", get_correlation_id(request), request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request"})
