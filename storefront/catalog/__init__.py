"""
Module 'catalog' (feature-first): point d'entrée public.
Catalogue produit canonique et tarification serveur du panier.
"""

from .products import PRODUCTS, is_integer, price_for_size, validate_cart_item, calculate_total, catalog_snapshot

__all__ = [
    "PRODUCTS",
    "is_integer",
    "price_for_size",
    "validate_cart_item",
    "calculate_total",
    "catalog_snapshot",
]
