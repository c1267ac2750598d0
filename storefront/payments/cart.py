"""
Logique panier pure (pas de Stripe): validation du payload, regroupement par variante,
construction des line_items et des métadonnées Stripe.
"""
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

from storefront.catalog.products import PRODUCTS, is_integer
from storefront.utils.validators import is_non_empty_string, is_valid_email

# Limite Stripe: 500 caractères par valeur de metadata
METADATA_VALUE_MAX = 500

SHIPPING_REQUIRED_FIELDS = ("name", "email", "line1", "city", "state", "postal_code", "country")

# module storefront.payments.cart
def validate_cart_payload(items: Any, require_price: bool = False) -> List[Dict[str, Any]]:
    """
    Contrôle de forme du panier brut [{design, size, color, quantity, price?}, ...].
    - Soulève HTTPException(400) au premier champ manquant ou hors bornes.
    - require_price: le flux Payment Intent exige un prix entier >= 1 (présence seulement,
      le montant facturé vient toujours du catalogue).
    """
    limits = PRODUCTS["limits"]
    if not isinstance(items, list) or not items:
        raise HTTPException(status_code=400, detail="Cart items are required")
    if len(items) > limits["max_cart_items"]:
        raise HTTPException(status_code=400, detail=f"Too many items in cart (max {limits['max_cart_items']})")

    for item in items:
        if not isinstance(item, dict):
            raise HTTPException(status_code=400, detail="Invalid cart item")
        if not is_non_empty_string(item.get("size")):
            raise HTTPException(status_code=400, detail="Size is required for all items")
        if not is_non_empty_string(item.get("color")):
            raise HTTPException(status_code=400, detail="Color is required for all items")
        if not is_non_empty_string(item.get("design")):
            raise HTTPException(status_code=400, detail="Design is required for all items")
        qty = item.get("quantity")
        if not is_integer(qty) or qty < limits["min_quantity"] or qty > limits["max_quantity"]:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid quantity for item (must be {limits['min_quantity']}-{limits['max_quantity']})",
            )
        if require_price:
            price = item.get("price")
            if not is_integer(price) or price < 1:
                raise HTTPException(status_code=400, detail="Invalid price for item")
    return items

def variant_key(item: Dict[str, Any]) -> str:
    return f"{item['design'].strip()}-{item['size'].strip()}-{item['color'].strip()}"

def group_variants(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Fusionne les lignes de même variante (design-size-color) en additionnant les quantités.
    - Conserve l'ordre de première apparition.
    - Reprend server_price si la ligne a été validée par le catalogue.
    """
    variants: Dict[str, Dict[str, Any]] = {}
    for item in items:
        key = variant_key(item)
        qty = int(item["quantity"])
        if key in variants:
            variants[key]["quantity"] += qty
            continue
        variants[key] = {
            "design": item["design"].strip(),
            "size": item["size"].strip(),
            "color": item["color"].strip(),
            "quantity": qty,
            "variant": key,
            "unit_price": item.get("server_price"),
        }
    return list(variants.values())

def to_line_items(variants: List[Dict[str, Any]], price_id: str = "", currency: str = "usd") -> List[Dict[str, Any]]:
    """
    Construit une ligne Stripe par variante.
    - Si price_id est fourni (prix créé dans le Dashboard), utilise {"price": price_id}.
    - Sinon, construit price_data avec unit_amount (centimes) depuis le prix serveur.
    - Soulève HTTPException(400) si aucune ligne valide n'est construite.
    """
    line_items: List[Dict[str, Any]] = []
    for v in variants:
        if v["quantity"] <= 0:
            continue
        if price_id:
            line_items.append({"price": price_id, "quantity": v["quantity"]})
            continue
        unit_price = v.get("unit_price") or 0
        if unit_price <= 0:
            continue
        line_items.append({
            "quantity": v["quantity"],
            "price_data": {
                "currency": currency,
                "unit_amount": int(round(unit_price * 100)),
                "product_data": {
                    "name": f"{v['design']} T-Shirt ({v['size']}, {v['color']})",
                    "metadata": {"variant": v["variant"]},
                },
            },
        })
    if not line_items:
        raise HTTPException(status_code=400, detail="No valid items in cart")
    return line_items

def _truncate(value: str) -> str:
    return value[:METADATA_VALUE_MAX]

def make_metadata(variants: List[Dict[str, Any]], subtotal: Optional[int] = None, shipping: Optional[int] = None) -> Dict[str, str]:
    """
    Sérialise les métadonnées de commande (toutes en chaînes, tronquées à 500 caractères).
    - cartSummary: "Drinks-M-Black(x2), ..."
    - orderType: single_variant si une seule variante, sinon mixed_cart
    """
    total_items = sum(v["quantity"] for v in variants)
    summary = ", ".join(f"{v['variant']}(x{v['quantity']})" for v in variants)
    metadata = {
        "totalItems": str(total_items),
        "uniqueVariants": str(len(variants)),
        "cartSummary": _truncate(summary),
        "orderType": "single_variant" if len(variants) == 1 else "mixed_cart",
    }
    if subtotal is not None:
        metadata["subtotal"] = str(subtotal)
    if shipping is not None:
        metadata["shipping"] = str(shipping)
    return metadata

def validate_shipping_address(address: Any) -> Dict[str, Any]:
    """
    Valide l'adresse de livraison (line2 facultative).
    - "Shipping <champ> is required" pour chaque champ obligatoire manquant ou vide.
    - "Invalid email address format" si l'email ne respecte pas le format attendu.
    """
    if not isinstance(address, dict):
        raise HTTPException(status_code=400, detail="Invalid shipping address")
    for field in SHIPPING_REQUIRED_FIELDS:
        if not is_non_empty_string(address.get(field)):
            raise HTTPException(status_code=400, detail=f"Shipping {field.replace('_', ' ')} is required")
    if not is_valid_email(address["email"]):
        raise HTTPException(status_code=400, detail="Invalid email address format")
    return address

def shipping_metadata(address: Dict[str, Any]) -> Dict[str, str]:
    """Aplatit l'adresse en clés shipping_* pour les métadonnées Stripe."""
    meta = {f"shipping_{field}": _truncate(str(address[field])) for field in SHIPPING_REQUIRED_FIELDS}
    meta["shipping_line2"] = _truncate(str(address.get("line2") or ""))
    return meta
