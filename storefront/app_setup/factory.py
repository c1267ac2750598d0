"""
Factory d'application recommandée pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import Depends, FastAPI
from storefront import config
from storefront.utils.rate_limit import optional_rate_limit
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_correlation_middleware
from .security import register_security_middleware
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - la limite globale par IP (dépendance appliquée à toutes les routes)
      - en-têtes de sécurité, puis corrélation, puis CORS/proxy (ordre inverse d'exécution)
      - gestionnaires d'exceptions, routes simples et routers
    Retour:
      FastAPI prêt à être utilisé par le serveur ASGI.
    """
    global_limit = optional_rate_limit(
        times=config.GLOBAL_RATE_LIMIT,
        seconds=config.RATE_LIMIT_WINDOW_SECONDS,
        scope="global",
        message="Too many requests from this IP, please try again later.",
    )
    app = FastAPI(title="T-Shirt Storefront API", lifespan=lifespan, dependencies=[Depends(global_limit)])
    register_security_middleware(app)
    register_correlation_middleware(app)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
