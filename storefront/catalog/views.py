from typing import Any, Dict

from fastapi import APIRouter

from storefront.catalog.products import catalog_snapshot

router = APIRouter(prefix="/api/catalog", tags=["Catalog API"])

# module storefront.catalog.views
@router.get("")
def get_catalog() -> Dict[str, Any]:
    """Catalogue public: le client affiche les prix serveur au lieu de les coder en dur."""
    return catalog_snapshot()
