import os
import pytest
from typing import Any, Dict, Generator, List
from fastapi.testclient import TestClient

# Variables obligatoires + pas de Redis pendant les tests (avant tout import de storefront)
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("FRONTEND_URL", "http://localhost:3000")
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from storefront.app import app as fastapi_app
from storefront.payments import stripe_client

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture(autouse=True)
def _reset_rate_limit_state(app, monkeypatch):
    # Pas de compteur mémoire hérité d'un test précédent
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app.state._rl_store = {}
    yield
    app.state._rl_store = {}

class FakeStripe:
    """Enregistre les appels Stripe et renvoie des objets plausibles."""

    def __init__(self):
        self.sessions: List[Dict[str, Any]] = []
        self.intents: List[Dict[str, Any]] = []
        self.session_status = {"id": "cs_test_123", "status": "complete", "customer_details": {"email": "buyer@example.com"}}
        self.intent_status = "succeeded"

    def create_session(self, **kwargs):
        self.sessions.append(kwargs)
        return {"id": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}

    def get_session(self, session_id):
        return dict(self.session_status, id=session_id)

    def create_payment_intent(self, **kwargs):
        self.intents.append(kwargs)
        return {"id": "pi_test_123", "client_secret": "pi_test_123_secret_abc", "amount": kwargs["amount"]}

    def retrieve_payment_intent(self, payment_intent_id):
        return {
            "id": payment_intent_id,
            "amount": 6500,
            "status": self.intent_status,
            "metadata": {"totalItems": "2", "orderType": "single_variant"},
        }

# Mocks Stripe: aucun appel réseau pendant les tests
@pytest.fixture(autouse=True)
def fake_stripe(monkeypatch) -> FakeStripe:
    fake = FakeStripe()
    monkeypatch.setattr(stripe_client, "create_session", fake.create_session)
    monkeypatch.setattr(stripe_client, "get_session", fake.get_session)
    monkeypatch.setattr(stripe_client, "create_payment_intent", fake.create_payment_intent)
    monkeypatch.setattr(stripe_client, "retrieve_payment_intent", fake.retrieve_payment_intent)
    return fake

@pytest.fixture
def drinks_item() -> Dict[str, Any]:
    return {"design": "Drinks", "size": "M", "color": "Black", "quantity": 2}
