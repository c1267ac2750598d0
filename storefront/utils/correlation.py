"""
Identifiant de corrélation par requête (traçage des logs).
- Posé par le middleware sur request.state et dans une ContextVar.
- Renvoyé au client dans l'en-tête X-Correlation-ID.
"""
from contextvars import ContextVar
from typing import Optional
from uuid import uuid4

from fastapi import Request

CORRELATION_HEADER = "X-Correlation-ID"

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

def new_correlation_id() -> str:
    return str(uuid4())

def get_correlation_id(request: Optional[Request] = None) -> str:
    if request is not None:
        cid = getattr(request.state, "correlation_id", None)
        if cid:
            return cid
    return correlation_id_var.get() or "no-id"
