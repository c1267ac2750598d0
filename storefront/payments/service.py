"""
Cas d'usage 'payments': orchestre catalogue, cart, stripe.
Les fonctions prepare_* sont pures (validation + tarification serveur);
les autres appellent Stripe et laissent remonter ses exceptions à la vue.
"""
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

from storefront import config
from storefront.catalog.products import calculate_total
from . import cart as cart_logic
from . import stripe_client

def _price_cart(cart_items: List[Dict[str, Any]]) -> Dict[str, Any]:
    # Prix serveur; la forme du panier est déjà contrôlée par l'appelant
    pricing = calculate_total(cart_items)
    if not pricing["valid"]:
        raise HTTPException(status_code=400, detail="; ".join(pricing["errors"]))
    return pricing

def prepare_checkout(cart_items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Prépare le payload Checkout à partir du panier client.
    - Valide la forme puis le catalogue (prix serveur, prix client ignoré).
    - Regroupe par variante et construit line_items + metadata.
    """
    cart_logic.validate_cart_payload(cart_items)
    pricing = _price_cart(cart_items)
    variants = cart_logic.group_variants(pricing["validated_items"])
    line_items = cart_logic.to_line_items(variants, price_id=config.STRIPE_PRICE_ID, currency=config.CURRENCY)
    metadata = cart_logic.make_metadata(variants, pricing["subtotal"], pricing["shipping"])
    return {"pricing": pricing, "variants": variants, "line_items": line_items, "metadata": metadata}

def shipping_options(shipping: int) -> List[Dict[str, Any]]:
    """Option de livraison forfaitaire unique (montant catalogue, en centimes)."""
    return [{
        "shipping_rate_data": {
            "type": "fixed_amount",
            "display_name": "Standard shipping",
            "fixed_amount": {"amount": int(shipping * 100), "currency": config.CURRENCY},
        },
    }]

def create_checkout_session(
    cart_items: List[Dict[str, Any]],
    *,
    success_url: str,
    cancel_url: str,
) -> Dict[str, Any]:
    """
    Crée la session Stripe Checkout pour un panier validé.
    success_url et cancel_url sont fournis par l'appelant (vue).
    """
    prepared = prepare_checkout(cart_items)
    return stripe_client.create_session(
        line_items=prepared["line_items"],
        success_url=success_url,
        cancel_url=cancel_url,
        metadata=prepared["metadata"],
        shipping_options=shipping_options(prepared["pricing"]["shipping"]),
        automatic_tax=config.STRIPE_AUTOMATIC_TAX,
    )

def checkout_session_status(session_id: str) -> Dict[str, Any]:
    """Statut d'une session Checkout pour la page de retour: {status, customer_email}."""
    session = stripe_client.get_session(session_id)
    details = session.get("customer_details") or {}
    return {"status": session.get("status"), "customer_email": details.get("email")}

def prepare_payment_intent(
    cart_items: List[Dict[str, Any]],
    shipping_address: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Prépare un Payment Intent: montant en centimes calculé sur les prix serveur.
    - amount = (sous-total + port) * 100
    - metadata: résumé des variantes + adresse aplatie (shipping_*) si fournie.
    """
    cart_logic.validate_cart_payload(cart_items, require_price=True)
    if shipping_address is not None:
        cart_logic.validate_shipping_address(shipping_address)
    pricing = _price_cart(cart_items)
    variants = cart_logic.group_variants(pricing["validated_items"])
    metadata = cart_logic.make_metadata(variants, pricing["subtotal"], pricing["shipping"])
    if shipping_address is not None:
        metadata.update(cart_logic.shipping_metadata(shipping_address))
    return {"amount": int(pricing["total"] * 100), "metadata": metadata, "pricing": pricing}

def create_payment_intent(
    cart_items: List[Dict[str, Any]],
    shipping_address: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    prepared = prepare_payment_intent(cart_items, shipping_address)
    intent = stripe_client.create_payment_intent(
        amount=prepared["amount"],
        currency=config.CURRENCY,
        metadata=prepared["metadata"],
    )
    return {"clientSecret": intent.get("client_secret"), "amount": prepared["amount"]}

def confirm_payment_intent(payment_intent_id: str) -> Dict[str, Any]:
    """
    Récupère le Payment Intent et rapporte le succès.
    - succeeded: {success: True, paymentIntent: {id, amount, status, metadata}}
    - sinon: {success: False, status}
    """
    intent = stripe_client.retrieve_payment_intent(payment_intent_id)
    status = intent.get("status")
    if status == "succeeded":
        return {
            "success": True,
            "paymentIntent": {
                "id": intent.get("id"),
                "amount": intent.get("amount"),
                "status": status,
                "metadata": dict(intent.get("metadata") or {}),
            },
        }
    return {"success": False, "status": status}
