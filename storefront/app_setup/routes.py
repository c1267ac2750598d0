"""
Routes simples (hors routers) exposées au client web.
- /api/config: valeurs publiques (clé publiable Stripe, URL de l'API) pour éviter de les coder en dur côté front.
- /favicon.ico: pas de contenu (204) pour éviter des 404 dans les logs.
"""
from fastapi import FastAPI
from fastapi.responses import Response
from pydantic import BaseModel
from starlette.status import HTTP_204_NO_CONTENT
from storefront import config

class PublicConfig(BaseModel):
    publishableKey: str
    apiUrl: str

def register_routes(app: FastAPI) -> None:
    @app.get("/api/config", response_model=PublicConfig, tags=["Config"])
    def get_public_config():
        return PublicConfig(publishableKey=config.STRIPE_PUBLISHABLE_KEY, apiUrl=config.PUBLIC_API_URL)

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
