"""
Catalogue produit (source de vérité des prix) et validation/tarification panier.
Logique pure: pas de Stripe, pas de HTTP.
"""
from typing import Any, Dict, List, Optional

# module storefront.catalog.products
PRODUCTS: Dict[str, Any] = {
    # Prix par taille (en dollars, convertis en centimes pour Stripe)
    "sizes": {
        "S": 30,
        "M": 30,
        "L": 30,
        "XL": 32,
        "2XL": 32,
    },
    "designs": [
        "Cats and Dogs",
        "Drinks",
        "Elephant Donkey",
        "Gender",
        "Religion",
    ],
    "colors": [
        "Black",
        "Gray",
        "Purple",
    ],
    # Frais de port forfaitaires (dollars)
    "shipping": 5,
    "limits": {
        "min_quantity": 1,
        "max_quantity": 10,
        "max_cart_items": 10,
    },
}

def is_integer(value: Any) -> bool:
    """Vrai pour un entier JSON (2 ou 2.0), faux pour les booléens et les chaînes."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()

def _normalized(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value

def price_for_size(size: Any) -> Optional[int]:
    """Prix catalogue d'une taille, None si la taille est inconnue."""
    size = _normalized(size)
    if not isinstance(size, str):
        return None
    return PRODUCTS["sizes"].get(size)

def validate_cart_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valide une ligne de panier et retourne le prix serveur.
    - Taille, design et couleur doivent appartenir au catalogue.
    - La quantité doit être un entier dans [min_quantity, max_quantity].
    - Retour: {"valid": bool, "errors": [...], "price": prix catalogue ou None}
    """
    errors: List[str] = []
    item = item if isinstance(item, dict) else {}
    limits = PRODUCTS["limits"]

    size = item.get("size")
    price = price_for_size(size)
    if price is None:
        errors.append(f"Invalid size: {size}. Valid sizes: {', '.join(PRODUCTS['sizes'])}")

    design = _normalized(item.get("design"))
    if design not in PRODUCTS["designs"]:
        errors.append(f"Invalid design: {item.get('design')}. Valid designs: {', '.join(PRODUCTS['designs'])}")

    color = _normalized(item.get("color"))
    if color not in PRODUCTS["colors"]:
        errors.append(f"Invalid color: {item.get('color')}. Valid colors: {', '.join(PRODUCTS['colors'])}")

    quantity = item.get("quantity")
    if (
        not is_integer(quantity)
        or quantity < limits["min_quantity"]
        or quantity > limits["max_quantity"]
    ):
        errors.append(
            f"Invalid quantity: {quantity}. "
            f"Must be between {limits['min_quantity']} and {limits['max_quantity']}"
        )

    return {"valid": not errors, "errors": errors, "price": price}

def calculate_total(cart_items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Calcule le total avec les prix serveur (le champ "price" du client est ignoré).
    - S'arrête sur la première ligne invalide et renvoie ses erreurs.
    - total = sous-total + frais de port forfaitaires.
    """
    subtotal = 0
    validated_items: List[Dict[str, Any]] = []

    for item in cart_items or []:
        validation = validate_cart_item(item)
        if not validation["valid"]:
            return {"valid": False, "errors": validation["errors"]}

        quantity = int(item["quantity"])
        item_total = validation["price"] * quantity
        subtotal += item_total
        validated_items.append({
            **item,
            "quantity": quantity,
            "server_price": validation["price"],
            "item_total": item_total,
        })

    shipping = PRODUCTS["shipping"]
    return {
        "valid": True,
        "subtotal": subtotal,
        "shipping": shipping,
        "total": subtotal + shipping,
        "validated_items": validated_items,
    }

def catalog_snapshot() -> Dict[str, Any]:
    """Vue publique du catalogue (tailles avec prix, designs, couleurs, port, limites)."""
    return {
        "sizes": [{"name": name, "price": price} for name, price in PRODUCTS["sizes"].items()],
        "designs": list(PRODUCTS["designs"]),
        "colors": list(PRODUCTS["colors"]),
        "shipping": PRODUCTS["shipping"],
        "limits": dict(PRODUCTS["limits"]),
    }
