import pytest

from checkout.payments import (
    AmountAuthority,
    ChargeSucceeded,
    CheckoutSubmission,
    ErrorKind,
    Failed,
    SubscriptionCreated,
    build_pipeline,
)

USER = {"id": "u1", "email": "u1@example.com"}


def test_scenario_charge(pipeline, gateway):
    # {email: "a@b.com", token: "tok_valid", subscriptionFlag: false} + 500 usd
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok_valid"), "default")
    assert res == ChargeSucceeded(charge_id="ch_test_1")
    assert gateway.calls == [
        ("create_customer", {"email": "a@b.com", "token": "tok_valid"}),
        ("create_charge", {"customer_id": "cus_test_1", "amount": 500, "currency": "usd", "description": "Rails Stripe customer"}),
    ]


def test_scenario_card_error_on_customer(pipeline, gateway):
    gateway.fail("create_customer", "card_error", "Your card was declined.")
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok_valid"), "default")
    assert res == Failed(kind=ErrorKind.CARD, message="Your card was declined.")
    assert "create_charge" not in gateway.operations


def test_scenario_subscription(pipeline, gateway):
    res = pipeline.run(
        CheckoutSubmission(email="a@b.com", payment_token="tok_valid", subscription=True), "default", USER
    )
    assert res == SubscriptionCreated(subscription_id="sub_test_1")
    assert gateway.operations == ["create_customer", "create_subscription"]
    assert gateway.params("create_subscription")["plan_id"] == "plan_9999"


@pytest.mark.parametrize("email, token", [("", "tok_valid"), ("a@b.com", ""), (None, None)])
def test_invalid_submission_makes_no_gateway_call(pipeline, gateway, email, token):
    res = pipeline.run(CheckoutSubmission(email=email, payment_token=token), "default")
    assert res.kind is ErrorKind.VALIDATION
    assert gateway.calls == []


def test_subscription_requires_authenticated_user(pipeline, gateway):
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok", subscription=True), "default", None)
    assert res.kind is ErrorKind.AUTHENTICATION
    assert gateway.calls == []


def test_subscription_auth_can_be_disabled(gateway, amounts, settings):
    pipeline = build_pipeline(gateway, amounts, settings.plans, require_auth_for_subscriptions=False)
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok", subscription=True), "default")
    assert isinstance(res, SubscriptionCreated)


def test_charge_allowed_for_anonymous(pipeline):
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok"), "premium", None)
    assert isinstance(res, ChargeSucceeded)


def test_amount_always_from_authority(pipeline, gateway):
    pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok"), "premium")
    assert gateway.params("create_charge")["amount"] == 2000
    assert gateway.params("create_charge")["description"] == "Premium"


def test_unknown_context_is_configuration_failure(pipeline, gateway):
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok"), "inconnu")
    assert res.kind is ErrorKind.CONFIGURATION
    assert gateway.calls == []


def test_missing_plan_is_configuration_failure(pipeline, gateway):
    res = pipeline.run(
        CheckoutSubmission(email="a@b.com", payment_token="tok", subscription=True), "premium", USER
    )
    assert res.kind is ErrorKind.CONFIGURATION
    assert gateway.calls == []


def test_client_plan_must_match_context_plan(pipeline, gateway):
    res = pipeline.run(
        CheckoutSubmission(email="a@b.com", payment_token="tok", subscription=True, plan_id="plan_gratuit"),
        "default",
        USER,
    )
    assert res.kind is ErrorKind.VALIDATION
    assert res.missing_field == "plan_id"
    assert gateway.calls == []


def test_matching_client_plan_accepted(pipeline, gateway):
    res = pipeline.run(
        CheckoutSubmission(email="a@b.com", payment_token="tok", subscription=True, plan_id="plan_9999"),
        "default",
        USER,
    )
    assert isinstance(res, SubscriptionCreated)


def test_pipeline_without_dispatch_is_a_programming_error():
    from checkout.payments.service import CheckoutPipeline, intake_stage

    with pytest.raises(RuntimeError):
        CheckoutPipeline([intake_stage]).run(CheckoutSubmission(email="a@b.com", payment_token="tok"), "default")


def test_empty_authority_never_charges(gateway, settings):
    pipeline = build_pipeline(gateway, AmountAuthority(amounts={}, descriptions={}), settings.plans)
    res = pipeline.run(CheckoutSubmission(email="a@b.com", payment_token="tok"), "default")
    assert res.kind is ErrorKind.CONFIGURATION
    assert gateway.calls == []
