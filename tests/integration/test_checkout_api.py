import pytest

from checkout.payments.errors import INSTRUMENT_MESSAGE
from checkout.payments.translator import CONFIGURATION_MESSAGE, TRANSPORT_MESSAGE


def test_checkout_details(client):
    res = client.get("/api/v1/checkout/default")
    assert res.status_code == 200
    data = res.json()
    assert data["amount"] == 500
    assert data["amount_display"] == "5.00 USD"
    assert data["description"] == "Rails Stripe customer"
    assert data["public_key"] == "pk_test_public"
    assert data["subscription_available"] is True
    assert "sk_test_secret" not in res.text
    assert res.headers["Cache-Control"].startswith("no-store")


def test_checkout_details_zero_decimal(client):
    assert client.get("/api/v1/checkout/tokyo").json()["amount_display"] == "1500 JPY"


def test_checkout_details_unknown_context(client):
    assert client.get("/api/v1/checkout/inconnu").status_code == 404


def test_submit_charge(client, gateway):
    res = client.post("/api/v1/checkout/default", json={"email": "a@b.com", "stripeToken": "tok_valid"})
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "charge_id": "ch_test_1"}
    assert gateway.operations == ["create_customer", "create_charge"]


def test_submit_ignores_client_amount(client, gateway):
    payload = {
        "email": "a@b.com",
        "payment_token": "tok_valid",
        "amount": 1,
        "currency": "jpy",
        "description": "cadeau",
    }
    res = client.post("/api/v1/checkout/default", json=payload)
    assert res.status_code == 200
    params = gateway.params("create_charge")
    assert params["amount"] == 500
    assert params["currency"] == "usd"
    assert params["description"] == "Rails Stripe customer"


def test_submit_subscription(client, gateway):
    res = client.post(
        "/api/v1/checkout/default",
        json={"stripeEmail": "a@b.com", "stripeToken": "tok_valid", "subscription": True},
    )
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "subscription_id": "sub_test_1"}
    assert gateway.operations == ["create_customer", "create_subscription"]
    assert gateway.params("create_subscription")["plan_id"] == "plan_9999"


def test_submit_card_error_redisplays_form(client, gateway):
    gateway.fail("create_customer", "card_error", "Your card was declined.")
    res = client.post("/api/v1/checkout/default", json={"email": "a@b.com", "stripeToken": "tok_declined"})
    assert res.status_code == 402
    data = res.json()
    assert data["detail"] == "Your card was declined."
    assert data["redisplay"] is True
    assert data["form"] == {"email": "a@b.com", "subscription": False}
    # le token n'est jamais renvoyé
    assert "tok_declined" not in res.text
    assert gateway.operations == ["create_customer"]


def test_submit_reused_token_hides_gateway_text(client, gateway):
    gateway.fail("create_customer", "invalid_request", "No such token: 'tok_used'", param="source")
    res = client.post("/api/v1/checkout/default", json={"email": "a@b.com", "stripeToken": "tok_used"})
    assert res.status_code == 402
    data = res.json()
    assert data["detail"] == INSTRUMENT_MESSAGE
    assert data["redisplay"] is True
    assert "No such token" not in res.text


def test_submit_missing_token(client, gateway):
    res = client.post("/api/v1/checkout/default", json={"email": "a@b.com"})
    assert res.status_code == 422
    data = res.json()
    assert data["error"] == "validation_error"
    assert data["field"] == "payment_token"
    assert gateway.calls == []


def test_submit_uses_authenticated_email_by_default(client, gateway):
    res = client.post("/api/v1/checkout/default", json={"stripeToken": "tok_valid"})
    assert res.status_code == 200
    assert gateway.params("create_customer")["email"] == "user@example.com"


def test_submit_transport_error(client, gateway):
    gateway.fail("create_charge", "api_connection", "Request timed out")
    res = client.post("/api/v1/checkout/default", json={"email": "a@b.com", "stripeToken": "tok_valid"})
    assert res.status_code == 503
    assert res.json()["detail"] == TRANSPORT_MESSAGE
    assert res.json()["redisplay"] is True


def test_submit_configuration_error_is_opaque(client, gateway):
    res = client.post("/api/v1/checkout/inconnu", json={"email": "a@b.com", "stripeToken": "tok_valid"})
    assert res.status_code == 500
    assert res.json()["detail"] == CONFIGURATION_MESSAGE
    assert "inconnu" not in res.text
    assert gateway.calls == []


def test_security_headers_allow_stripe_widget(client):
    res = client.get("/api/v1/checkout/default")
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "https://js.stripe.com" in res.headers["Content-Security-Policy"]


class TestAnonymous:
    @pytest.fixture
    def current_user(self):
        return None

    def test_anonymous_charge_allowed(self, client, gateway):
        res = client.post("/api/v1/checkout/premium", json={"email": "a@b.com", "stripeToken": "tok_valid"})
        assert res.status_code == 200
        assert gateway.params("create_charge")["amount"] == 2000

    def test_anonymous_subscription_requires_login(self, client, gateway):
        res = client.post(
            "/api/v1/checkout/default",
            json={"email": "a@b.com", "stripeToken": "tok_valid", "subscription": True},
        )
        assert res.status_code == 401
        assert res.json()["redisplay"] is False
        assert gateway.calls == []

    def test_anonymous_without_email_fails_validation(self, client, gateway):
        res = client.post("/api/v1/checkout/default", json={"stripeToken": "tok_valid"})
        assert res.status_code == 422
        assert res.json()["field"] == "email"
        assert gateway.calls == []
