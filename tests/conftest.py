import os

# Pas de Redis en tests: doit précéder l'import de l'app
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Any, Dict, Generator, List, Optional, Tuple
from fastapi.testclient import TestClient

from checkout.app import app as fastapi_app
from checkout.config import load_checkout_settings
from checkout.payments import AmountAuthority, GatewayError, build_pipeline
from checkout.payments import views as checkout_views
from checkout.utils.security import get_optional_user

CHECKOUT_ENV = {
    "CHECKOUT_AMOUNTS": '{"default": 500, "premium": 2000, "tokyo": 1500}',
    "CHECKOUT_DESCRIPTIONS": '{"default": "Rails Stripe customer", "premium": "Premium", "tokyo": "Tokyo"}',
    "CHECKOUT_PLANS": '{"default": "plan_9999"}',
    "CHECKOUT_CURRENCIES": '{"tokyo": "JPY"}',
    "CHECKOUT_CURRENCY": "usd",
    "STRIPE_SECRET_KEY": "sk_test_secret",
    "STRIPE_PUBLIC_KEY": "pk_test_public",
}

TEST_USER = {"id": "test-user", "email": "user@example.com"}

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakeGateway:
    """Passerelle enregistreuse: mêmes signatures que StripeGateway."""

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.failures: Dict[str, GatewayError] = {}
        self.ids = {
            "create_customer": "cus_test_1",
            "create_charge": "ch_test_1",
            "create_subscription": "sub_test_1",
        }

    def fail(self, operation: str, category: str, message: str, param: Optional[str] = None):
        self.failures[operation] = GatewayError(category=category, message=message, param=param)

    def _record(self, operation: str, **params):
        self.calls.append((operation, params))
        if operation in self.failures:
            return self.failures[operation]
        return {"id": self.ids[operation]}

    @property
    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]

    def params(self, operation: str) -> Dict[str, Any]:
        return next(p for op, p in self.calls if op == operation)

    def create_customer(self, email: str, token: str):
        return self._record("create_customer", email=email, token=token)

    def create_charge(self, customer_id: str, amount: int, currency: str, description: str):
        return self._record("create_charge", customer_id=customer_id, amount=amount, currency=currency, description=description)

    def create_subscription(self, customer_id: str, plan_id: str):
        return self._record("create_subscription", customer_id=customer_id, plan_id=plan_id)


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture
def settings():
    return load_checkout_settings(CHECKOUT_ENV)

@pytest.fixture
def amounts(settings):
    return AmountAuthority.from_settings(settings)

@pytest.fixture
def gateway():
    return FakeGateway()

@pytest.fixture
def pipeline(gateway, amounts, settings):
    return build_pipeline(gateway, amounts, settings.plans, settings.require_auth_for_subscriptions)

@pytest.fixture
def current_user():
    # Modifiable par test: None = visiteur anonyme
    return dict(TEST_USER)

@pytest.fixture
def client(app, settings, amounts, pipeline, current_user) -> Generator[TestClient, None, None]:
    """Client API branché sur la FakeGateway (aucun appel Stripe réel)."""
    user = current_user
    app.dependency_overrides[checkout_views.get_settings] = lambda: settings
    app.dependency_overrides[checkout_views.get_amounts] = lambda: amounts
    app.dependency_overrides[checkout_views.get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_optional_user] = lambda: user
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
