from typing import Any, Dict, Optional
from pydantic import BaseModel

# module storefront.payments.models
class CheckoutSessionCreated(BaseModel):
    sessionId: str
    url: Optional[str] = None

class CheckoutSessionStatus(BaseModel):
    status: Optional[str] = None
    customer_email: Optional[str] = None

class PaymentIntentCreated(BaseModel):
    clientSecret: Optional[str] = None
    amount: int

class PaymentIntentSummary(BaseModel):
    id: Optional[str] = None
    amount: Optional[int] = None
    status: Optional[str] = None
    metadata: Dict[str, Any] = {}

class PaymentIntentConfirmation(BaseModel):
    success: bool
    paymentIntent: Optional[PaymentIntentSummary] = None
    status: Optional[str] = None
