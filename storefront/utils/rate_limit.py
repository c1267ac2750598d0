from typing import Optional, Dict, Any
from fastapi import Request, Response, HTTPException
import logging
import os
import time

from storefront.utils.correlation import get_correlation_id

logger = logging.getLogger(__name__)

def humanize_window(seconds: int) -> str:
    if seconds % 3600 == 0:
        n, unit = seconds // 3600, "hour"
    elif seconds % 60 == 0:
        n, unit = seconds // 60, "minute"
    else:
        n, unit = seconds, "second"
    return f"{n} {unit}{'s' if n > 1 else ''}"

def client_ip(request: Request) -> str:
    return request.client.host if request.client else "local"

def optional_rate_limit(times: int, seconds: int, scope: Optional[str] = None, message: str = "Too Many Requests"):
    """
    Dépendance de rate limiting par IP.
    - scope: clé partagée par toutes les routes (limite globale); sinon clé par chemin.
    - 429: {"error": message, "retryAfter": "15 minutes"} + en-tête Retry-After.
    - LOCAL_RATE_LIMIT_FALLBACK=1: compteur mémoire à fenêtre glissante (app.state).
    - rate_limit_enabled=False: aucun contrôle.
    - Sinon fastapi-limiter (Redis) si initialisé.
    """
    def _reject(request: Request, retry_after: int):
        logger.warning(
            "[%s] Rate limit exceeded scope=%s ip=%s path=%s",
            get_correlation_id(request), scope or "route", client_ip(request), request.url.path,
        )
        raise HTTPException(
            status_code=429,
            detail={"error": message, "retryAfter": humanize_window(seconds)},
            headers={"Retry-After": str(retry_after)},
        )

    async def _dep(request: Request, response: Response):
        def _key_from_request(req: Request) -> str:
            ip = client_ip(req)
            if scope:
                return f"ip:{ip}:{scope}"
            return f"ip:{ip}:{req.url.path}"

        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _key_from_request(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                retry_after = int(seconds - (now - hits[0])) + 1
                store[key] = hits
                request.app.state._rl_store = store
                _reject(request, retry_after)
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        try:
            from fastapi_limiter import FastAPILimiter
            from fastapi_limiter.depends import RateLimiter
        except ImportError:
            return
        if getattr(FastAPILimiter, "redis", None) is None:
            return

        async def _identifier(req: Request) -> str:
            return _key_from_request(req)

        async def _callback(req: Request, resp: Response, pexpire: int):
            _reject(req, max(1, -(-pexpire // 1000)))

        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier, callback=_callback)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible: pas de 429 en prod, on laisse passer
            logger.exception("[%s] Rate limiter backend failure", get_correlation_id(request))
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    fallback = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"

    limiter_ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    except ImportError:
        limiter_ready = False

    backend = "memory" if fallback else ("redis" if limiter_ready else None)
    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready or fallback,
        "backend": backend,
    }

    if backend == "redis":
        from urllib.parse import urlparse
        redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
        if redis_url:
            p = urlparse(redis_url)
            info["redis"] = {"scheme": p.scheme, "host": p.hostname, "port": p.port}

    return info
