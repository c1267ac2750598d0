"""
Point d'entrée principal du serveur de la boutique.

Usage:
    python -m storefront

Ce mode lance uvicorn directement et lit quelques variables d'environnement:
- PORT: port d'écoute (par défaut 8080)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs uvicorn (ex: "info", "debug")
"""
import os
import sys
import uvicorn

from storefront import config

if __name__ == "__main__":
    missing = config.missing_required_env()
    if missing:
        print(f"Missing required environment variables: {', '.join(missing)}", file=sys.stderr)
        print("Please copy .env.example to .env and fill in the values", file=sys.stderr)
        sys.exit(1)
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    log_level = os.environ.get("LOG_LEVEL", "info")
    uvicorn.run(
        "storefront.asgi:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=reload_flag,
        log_level=log_level,
        proxy_headers=True,
    )
