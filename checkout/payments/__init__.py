"""
Module 'payments' (feature-first): point d'entrée public.
Réunit montants, intake, client Stripe, provisionnement, routage et traduction des erreurs.
"""

from .errors import ErrorKind, GatewayError, ConfigurationError, classify_gateway_error, user_message
from .money import MinorUnits, format_minor_units
from .models import (
    CheckoutSubmission,
    ValidatedSubmission,
    AmountSpec,
    PlanReference,
    GatewayCustomer,
    FlowKind,
    ChargeFlow,
    SubscriptionFlow,
    ChargeSucceeded,
    SubscriptionCreated,
    Failed,
)
from .amounts import AmountAuthority
from .intake import validate_submission
from .stripe_client import StripeGateway, configure_stripe
from .customers import CustomerProvisioner
from .charges import ChargeProcessor
from .subscriptions import SubscriptionProvisioner
from .service import TransactionRouter, CheckoutPipeline, build_pipeline
from .translator import CheckoutResponse, translate

__all__ = [
    # errors
    "ErrorKind",
    "GatewayError",
    "ConfigurationError",
    "classify_gateway_error",
    "user_message",
    # money
    "MinorUnits",
    "format_minor_units",
    # models
    "CheckoutSubmission",
    "ValidatedSubmission",
    "AmountSpec",
    "PlanReference",
    "GatewayCustomer",
    "FlowKind",
    "ChargeFlow",
    "SubscriptionFlow",
    "ChargeSucceeded",
    "SubscriptionCreated",
    "Failed",
    # composants
    "AmountAuthority",
    "validate_submission",
    "StripeGateway",
    "configure_stripe",
    "CustomerProvisioner",
    "ChargeProcessor",
    "SubscriptionProvisioner",
    "TransactionRouter",
    "CheckoutPipeline",
    "build_pipeline",
    # réponses
    "CheckoutResponse",
    "translate",
]
