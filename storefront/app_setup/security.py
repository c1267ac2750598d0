from fastapi import FastAPI
from storefront.config import IS_PRODUCTION

# Pages de documentation FastAPI (Swagger UI / ReDoc chargés depuis un CDN)
DOCS_PATHS = ("/docs", "/redoc")
SWAGGER_CDNS = ["https://cdn.jsdelivr.net"]

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if IS_PRODUCTION:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        # CSP: Stripe.js (script + iframe) et l'API Stripe; CDN Swagger sur /docs uniquement
        stripe_js = "https://js.stripe.com"
        script_src = f"'self' {stripe_js}"
        style_src = "'self' 'unsafe-inline'"
        img_src = f"'self' data: {stripe_js} https://*.stripe.com"
        if request.url.path.startswith(DOCS_PATHS):
            cdns = " ".join(SWAGGER_CDNS)
            script_src += f" 'unsafe-inline' {cdns}"
            style_src += f" {cdns}"
            img_src += " https://fastapi.tiangolo.com"
        csp = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; "
            f"img-src {img_src}; "
            f"style-src {style_src}; "
            f"script-src {script_src}; "
            f"frame-src {stripe_js}; "
            "connect-src 'self' https://api.stripe.com"
        )
        response.headers["Content-Security-Policy"] = csp

        return response
