# storefront.config
from pathlib import Path
import os
from typing import List
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

"""
Configuration centrale du serveur de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets Stripe, l'URL du front et le mode (dev/prod)
- Calcule les origines CORS et les URLs de redirection du checkout
- Expose les réglages du rate limiting (fenêtre, quotas global/checkout)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Mode d'exécution: APP_ENV prioritaire, NODE_ENV accepté (compat déploiement front)
APP_ENV = _clean_env(os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").lower()
IS_PRODUCTION = APP_ENV == "production"
PORT = _int_env("PORT", 8080)

# Stripe: clé secrète (serveur), version d'API optionnelle, prix fixe optionnel
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_API_VERSION = _clean_env(os.getenv("STRIPE_API_VERSION") or "")
STRIPE_PRICE_ID = _clean_env(os.getenv("STRIPE_PRICE_ID") or "")
STRIPE_AUTOMATIC_TAX = (os.getenv("STRIPE_AUTOMATIC_TAX", "false").lower() == "true")
CURRENCY = _clean_env(os.getenv("CURRENCY") or "usd").lower()

# Valeurs publiques reprises par le client (clé publiable, URL de l'API)
STRIPE_PUBLISHABLE_KEY = _clean_env(os.getenv("NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY") or "")
PUBLIC_API_URL = _clean_env(os.getenv("NEXT_PUBLIC_API_URL") or "")

# URL du front (redirections Stripe + CORS en production)
FRONTEND_URL = _clean_env(os.getenv("FRONTEND_URL") or "").rstrip("/")

# CORS: en production seule l'origine du front est autorisée
_cors_env = [o.strip() for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip()]
if _cors_env:
    CORS_ORIGINS: List[str] = _cors_env
elif IS_PRODUCTION:
    CORS_ORIGINS = [FRONTEND_URL] if FRONTEND_URL else []
else:
    CORS_ORIGINS = ["http://localhost:3000"]

# Proxies de confiance pour X-Forwarded-For (IP client du rate limiting)
TRUSTED_PROXIES = [h.strip() for h in os.getenv("TRUSTED_PROXIES", "127.0.0.1").split(",") if h.strip()]

# Pages de retour du checkout (relatives à FRONTEND_URL)
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/return?session_id={CHECKOUT_SESSION_ID}")
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/checkout")

# Rate limiting: 100 req / 15 min global, 5 req / 15 min sur la création de paiement
RATE_LIMIT_WINDOW_SECONDS = _int_env("RATE_LIMIT_WINDOW_SECONDS", 15 * 60)
GLOBAL_RATE_LIMIT = _int_env("GLOBAL_RATE_LIMIT", 100)
CHECKOUT_RATE_LIMIT = _int_env("CHECKOUT_RATE_LIMIT", 5)

REQUIRED_ENV_VARS = ("STRIPE_SECRET_KEY", "FRONTEND_URL")

def missing_required_env() -> List[str]:
    """Liste les variables obligatoires absentes (lues sur les constantes du module)."""
    current = {"STRIPE_SECRET_KEY": STRIPE_SECRET_KEY, "FRONTEND_URL": FRONTEND_URL}
    return [name for name in REQUIRED_ENV_VARS if not current.get(name)]

def require_environment() -> None:
    """
    Bloque le démarrage si une variable obligatoire manque.
    - Soulève RuntimeError avec un message explicite (le serveur ne démarre pas).
    """
    missing = missing_required_env()
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please copy .env.example to .env and fill in the values"
        )

def checkout_success_url() -> str:
    return f"{FRONTEND_URL}{CHECKOUT_SUCCESS_PATH}"

def checkout_cancel_url() -> str:
    return f"{FRONTEND_URL}{CHECKOUT_CANCEL_PATH}"
