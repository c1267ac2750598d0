"""
Registre central des routers (API checkout, payment intent, catalogue, health).
"""
from fastapi import FastAPI
from storefront.payments.views import checkout_router, payment_intent_router
from storefront.catalog.views import router as catalog_router
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    # API
    app.include_router(checkout_router)
    app.include_router(payment_intent_router)
    app.include_router(catalog_router)
    # Health & monitoring
    app.include_router(health_router)
