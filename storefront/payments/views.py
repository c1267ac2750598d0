import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from storefront import config
from storefront.utils.correlation import get_correlation_id
from storefront.utils.rate_limit import optional_rate_limit
from storefront.payments import service as payments_service
from storefront.payments import stripe_client
from storefront.payments.models import (
    CheckoutSessionCreated,
    CheckoutSessionStatus,
    PaymentIntentCreated,
    PaymentIntentConfirmation,
)

logger = logging.getLogger(__name__)
checkout_router = APIRouter(prefix="/api/checkout", tags=["Checkout API"])
payment_intent_router = APIRouter(prefix="/api/payment-intent", tags=["Payment Intent API"])

def _checkout_rate_limit(scope: Optional[str] = None):
    return optional_rate_limit(
        times=config.CHECKOUT_RATE_LIMIT,
        seconds=config.RATE_LIMIT_WINDOW_SECONDS,
        scope=scope,
        message="Too many checkout attempts, please try again later.",
    )

async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    return body

def _log_stripe_failure(action: str, request: Request, err: Exception, **extra: Any) -> None:
    fields = stripe_client.sanitize_stripe_error(err)
    fields["timestamp"] = datetime.now(timezone.utc).isoformat()
    fields.update(extra)
    logger.error("%s failed [%s]: %s", action, get_correlation_id(request), fields)

# Quota partagé par tout le montage /api/checkout (création + statut)
_checkout_mount_limit = _checkout_rate_limit(scope="checkout")

# module storefront.payments.views
@checkout_router.post("", response_model=CheckoutSessionCreated, dependencies=[Depends(_checkout_mount_limit)])
async def create_checkout_session(request: Request):
    """
    Crée une session Checkout Stripe pour le panier du client.
    - Entrée JSON: { "cartItems": [ { "design", "size", "color", "quantity" }, ... ] }
    - Étapes:
      1) Contrôle de forme (payments.cart.validate_cart_payload)
      2) Tarification serveur (catalog.calculate_total), prix client ignoré
      3) Regroupement par variante, line_items + metadata
      4) Création de la session Stripe et renvoi de {sessionId, url}
    - Erreurs: 400 {error} si panier invalide ou échec Stripe (détail Stripe jamais exposé)
    """
    body = await _read_json(request)
    cart_items = body.get("cartItems")
    try:
        session = await run_in_threadpool(
            payments_service.create_checkout_session,
            cart_items,
            success_url=config.checkout_success_url(),
            cancel_url=config.checkout_cancel_url(),
        )
    except HTTPException:
        raise
    except Exception as e:
        _log_stripe_failure("Checkout Session creation", request, e, itemCount=len(cart_items or []))
        raise HTTPException(status_code=400, detail="Stripe session failed")
    logger.info("[%s] checkout session created id=%s", get_correlation_id(request), session.get("id"))
    return {"sessionId": session.get("id"), "url": session.get("url")}

@checkout_router.get("/session", response_model=CheckoutSessionStatus, dependencies=[Depends(_checkout_mount_limit)])
async def get_checkout_session(request: Request, session_id: Optional[str] = None):
    """Statut de la session pour la page de retour du front: {status, customer_email}."""
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id is required")
    try:
        return await run_in_threadpool(payments_service.checkout_session_status, session_id)
    except Exception as e:
        _log_stripe_failure("Checkout Session retrieval", request, e)
        raise HTTPException(status_code=400, detail="Failed to retrieve checkout session")

@payment_intent_router.post("/create", response_model=PaymentIntentCreated, dependencies=[Depends(_checkout_rate_limit())])
async def create_payment_intent(request: Request):
    """
    Crée un Payment Intent pour le checkout intégré à la page.
    - Entrée JSON: { "cartItems": [...avec price...], "shippingAddress"?: {...} }
    - Montant: (sous-total serveur + port) * 100, jamais le prix envoyé par le client
    - Retour: {clientSecret, amount}
    """
    body = await _read_json(request)
    cart_items = body.get("cartItems")
    shipping_address = body.get("shippingAddress")
    try:
        return await run_in_threadpool(payments_service.create_payment_intent, cart_items, shipping_address)
    except HTTPException:
        raise
    except Exception as e:
        _log_stripe_failure("Payment Intent creation", request, e, itemCount=len(cart_items or []))
        raise HTTPException(status_code=400, detail="Payment Intent creation failed")

@payment_intent_router.get(
    "/confirm/{payment_intent_id}",
    response_model=PaymentIntentConfirmation,
    response_model_exclude_none=True,
)
async def confirm_payment_intent(request: Request, payment_intent_id: str):
    """
    Confirme le succès d'un paiement.
    - succeeded: {success: true, paymentIntent: {id, amount, status, metadata}}
    - autre statut: {success: false, status}
    """
    if not payment_intent_id.strip():
        raise HTTPException(status_code=400, detail="Payment Intent ID is required")
    try:
        return await run_in_threadpool(payments_service.confirm_payment_intent, payment_intent_id)
    except Exception as e:
        _log_stripe_failure("Payment Intent retrieval", request, e, paymentIntentId=payment_intent_id[:20] + "...")
        raise HTTPException(status_code=400, detail="Failed to retrieve payment details")
