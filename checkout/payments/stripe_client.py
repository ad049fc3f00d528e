"""
Adaptateur Stripe: centralise les appels à la passerelle.
Chaque opération retourne {"id": ...} ou une GatewayError; aucune exception
du SDK ne sort de ce module.
"""
import logging
from typing import Any, Callable, Dict, Union

import stripe

from .errors import (
    API_CONNECTION,
    API_ERROR,
    AUTHENTICATION,
    CARD_ERROR,
    INVALID_REQUEST,
    RATE_LIMIT,
    GatewayError,
)

logger = logging.getLogger(__name__)

GatewayResult = Union[Dict[str, Any], GatewayError]


# module checkout.payments.stripe_client
def configure_stripe(timeout_seconds: float) -> None:
    """
    Configure le SDK une fois au démarrage.
    - Timeout réseau borné (un timeout remonte en APIConnectionError)
    - Aucune relance automatique: la décision revient à l'appelant
    """
    stripe.default_http_client = stripe.RequestsClient(timeout=timeout_seconds)
    stripe.max_network_retries = 0


def _gateway_message(e: stripe.StripeError) -> str:
    return getattr(e, "user_message", None) or str(e) or e.__class__.__name__


def _to_gateway_error(e: stripe.StripeError) -> GatewayError:
    if isinstance(e, stripe.CardError):
        category = CARD_ERROR
    elif isinstance(e, stripe.InvalidRequestError):
        category = INVALID_REQUEST
    elif isinstance(e, stripe.RateLimitError):
        category = RATE_LIMIT
    elif isinstance(e, stripe.APIConnectionError):
        category = API_CONNECTION
    elif isinstance(e, stripe.AuthenticationError):
        category = AUTHENTICATION
    else:
        category = API_ERROR
    return GatewayError(category=category, message=_gateway_message(e), param=getattr(e, "param", None))


class StripeGateway:
    """
    Les trois opérations dont dépend l'orchestrateur.
    La clé secrète est passée à chaque appel (api_key=) et n'est jamais journalisée.
    """

    def __init__(self, api_key: str):
        self._api_key = api_key

    def __repr__(self) -> str:
        return f"StripeGateway(configured={bool(self._api_key)})"

    def _call(self, operation: str, create: Callable[..., Any], **params: Any) -> GatewayResult:
        try:
            obj = create(api_key=self._api_key, **params)
        except stripe.StripeError as e:
            error = _to_gateway_error(e)
            logger.info("stripe.%s failed category=%s", operation, error.category)
            return error
        return {"id": obj["id"]}

    def create_customer(self, email: str, token: str) -> GatewayResult:
        return self._call("customer.create", stripe.Customer.create, email=email, source=token)

    def create_charge(self, customer_id: str, amount: int, currency: str, description: str) -> GatewayResult:
        # amount: entier en unités mineures (jamais de flottant)
        return self._call(
            "charge.create",
            stripe.Charge.create,
            customer=customer_id,
            amount=amount,
            currency=currency,
            description=description,
        )

    def create_subscription(self, customer_id: str, plan_id: str) -> GatewayResult:
        return self._call(
            "subscription.create",
            stripe.Subscription.create,
            customer=customer_id,
            items=[{"plan": plan_id}],
        )
