"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
import stripe
from typing import Any, Dict, List, Optional

from storefront import config

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY.
    - Épingle stripe.api_version si STRIPE_API_VERSION est défini.
    """
    if config.STRIPE_SECRET_KEY:
        stripe.api_key = config.STRIPE_SECRET_KEY
    if config.STRIPE_API_VERSION:
        stripe.api_version = config.STRIPE_API_VERSION
    return stripe

def _as_dict(obj: Any) -> Dict[str, Any]:
    # StripeObject: to_dict() sur les SDK récents, dict() sinon
    if isinstance(obj, dict):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    return to_dict() if callable(to_dict) else dict(obj)

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    success_url: str,
    cancel_url: str,
    metadata: Dict[str, str],
    shipping_options: Optional[List[Dict[str, Any]]] = None,
    automatic_tax: bool = False,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout en mode "payment".
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
    """
    require_stripe()
    params: Dict[str, Any] = {
        "mode": "payment",
        "line_items": line_items,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata": metadata,
    }
    if shipping_options:
        params["shipping_options"] = shipping_options
    if automatic_tax:
        params["automatic_tax"] = {"enabled": True}
    session = stripe.checkout.Session.create(**params)
    return _as_dict(session)

def get_session(session_id: str) -> Dict[str, Any]:
    """
    Récupère une session Stripe Checkout par son identifiant.
    Retour: dict session incluant "id", "status", "customer_details", etc.
    """
    require_stripe()
    session = stripe.checkout.Session.retrieve(session_id)
    return _as_dict(session)

def create_payment_intent(*, amount: int, currency: str, metadata: Dict[str, str]) -> Dict[str, Any]:
    """
    Crée un Payment Intent (montant en centimes) avec les moyens de paiement automatiques.
    Retour: dict incluant "id" et "client_secret".
    """
    require_stripe()
    intent = stripe.PaymentIntent.create(
        amount=amount,
        currency=currency,
        metadata=metadata,
        automatic_payment_methods={"enabled": True},
    )
    return _as_dict(intent)

def retrieve_payment_intent(payment_intent_id: str) -> Dict[str, Any]:
    require_stripe()
    intent = stripe.PaymentIntent.retrieve(payment_intent_id)
    return _as_dict(intent)

def sanitize_stripe_error(err: Exception) -> Dict[str, Optional[str]]:
    """
    Champs loggables d'une erreur Stripe: message, type, code.
    - Jamais de clé, de payload ni d'en-têtes de requête.
    """
    error_obj = getattr(err, "error", None)
    return {
        "error": getattr(err, "user_message", None) or str(err),
        "type": getattr(error_obj, "type", None) or type(err).__name__,
        "code": getattr(err, "code", None),
    }
