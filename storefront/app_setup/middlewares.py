import logging
from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from storefront.config import CORS_ORIGINS, TRUSTED_PROXIES
from storefront.utils.correlation import (
    CORRELATION_HEADER,
    correlation_id_var,
    new_correlation_id,
)

logger = logging.getLogger(__name__)

"""
Middlewares transverses de l'application.
- register_basic_middlewares: CORS (origine du front) et confiance en X-Forwarded-* (IP client).
- register_correlation_middleware: identifiant de corrélation par requête + log d'accès.
Notes:
- L'ordre d'ajout est important: le dernier middleware ajouté s'exécute en premier.
"""
def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - CORSMiddleware: n'autorise que l'origine du front (localhost:3000 en dev).
    - ProxyHeadersMiddleware: fait confiance aux en-têtes du proxy pour l'IP client (rate limiting).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=TRUSTED_PROXIES)

def register_correlation_middleware(app: FastAPI) -> None:
    """
    Attribue un UUID à chaque requête:
    - request.state.correlation_id + ContextVar (lisible depuis les services)
    - en-tête de réponse X-Correlation-ID
    - une ligne de log par requête: [id] METHOD path
    """
    @app.middleware("http")
    async def correlation_id(request: Request, call_next):
        cid = new_correlation_id()
        request.state.correlation_id = cid
        token = correlation_id_var.set(cid)
        try:
            logger.info("[%s] %s %s", cid, request.method, request.url.path)
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers[CORRELATION_HEADER] = cid
        return response
