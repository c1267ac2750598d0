"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier, client Stripe et cas d'usage (Checkout Session, Payment Intent).
"""

from .cart import (
    validate_cart_payload,
    variant_key,
    group_variants,
    to_line_items,
    make_metadata,
    validate_shipping_address,
    shipping_metadata,
)
from .stripe_client import (
    require_stripe,
    create_session,
    get_session,
    create_payment_intent,
    retrieve_payment_intent,
    sanitize_stripe_error,
)
from .service import (
    prepare_checkout,
    create_checkout_session,
    checkout_session_status,
    prepare_payment_intent,
    confirm_payment_intent,
)

__all__ = [
    # cart
    "validate_cart_payload",
    "variant_key",
    "group_variants",
    "to_line_items",
    "make_metadata",
    "validate_shipping_address",
    "shipping_metadata",
    # stripe
    "require_stripe",
    "create_session",
    "get_session",
    "create_payment_intent",
    "retrieve_payment_intent",
    "sanitize_stripe_error",
    # services
    "prepare_checkout",
    "create_checkout_session",
    "checkout_session_status",
    "prepare_payment_intent",
    "confirm_payment_intent",
]
