import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from checkout.config import CheckoutSettings
from checkout.utils.rate_limit import optional_rate_limit
from checkout.utils.security import get_optional_user
from checkout.payments.amounts import AmountAuthority
from checkout.payments.errors import ConfigurationError
from checkout.payments.models import CheckoutSubmission
from checkout.payments.money import format_minor_units
from checkout.payments.service import CheckoutPipeline
from checkout.payments.translator import translate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])


class CheckoutRequest(BaseModel):
    """
    Formulaire de checkout. Tout champ de montant/description envoyé par le client
    est ignoré (extra="ignore" par défaut).
    """
    email: Optional[str] = Field(default=None, validation_alias=AliasChoices("email", "stripeEmail"))
    payment_token: Optional[str] = Field(default=None, validation_alias=AliasChoices("payment_token", "stripeToken"))
    subscription: bool = False
    plan_id: Optional[str] = None


# Dépendances (surchargées dans les tests via app.dependency_overrides)
def get_settings(request: Request) -> CheckoutSettings:
    return request.app.state.settings

def get_amounts(request: Request) -> AmountAuthority:
    return request.app.state.amounts

def get_pipeline(request: Request) -> CheckoutPipeline:
    return request.app.state.pipeline


# module checkout.payments.views
@router.get("/{context}")
def checkout_details(
    context: str,
    amounts: AmountAuthority = Depends(get_amounts),
    settings: CheckoutSettings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Données d'affichage du formulaire de paiement pour un contexte.
    - amount_display: conversion lecture seule (ex: "5.00 USD")
    - public_key: clé publiable pour le widget de tokenisation Stripe
    - 404 si le contexte n'a ni montant ni plan
    """
    details: Dict[str, Any] = {
        "context": context,
        "public_key": settings.stripe_public_key,
        "subscription_available": context in settings.plans,
    }
    try:
        spec = amounts.resolve(context)
    except ConfigurationError:
        if not details["subscription_available"]:
            return JSONResponse(status_code=404, content={"detail": "Offre introuvable"})
        return details
    details.update(
        amount=spec.amount.value,
        currency=spec.currency,
        amount_display=format_minor_units(spec.amount, spec.currency),
        description=spec.description,
    )
    return details


@router.post("/{context}", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def submit_checkout(
    context: str,
    body: CheckoutRequest,
    pipeline: CheckoutPipeline = Depends(get_pipeline),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
):
    """
    Soumission unique pour le paiement et l'abonnement (distingués par "subscription").
    - Entrée JSON: {"email": "...", "stripeToken": "tok_...", "subscription": false}
    - email: à défaut, celui de l'utilisateur connecté
    - Réponses: 200 {charge_id | subscription_id}; 402 carte refusée; 422 formulaire
      invalide; 503 passerelle indisponible; 401 connexion requise; 500 opaque
    - Les erreurs réaffichables renvoient aussi le formulaire (sans le token)
    """
    email = body.email
    if not (email or "").strip() and user:
        email = user.get("email")
    submission = CheckoutSubmission(
        email=email,
        payment_token=body.payment_token,
        subscription=body.subscription,
        plan_id=body.plan_id,
    )
    result = pipeline.run(submission, context, user)
    response = translate(result)
    payload = dict(response.payload)
    if response.redisplay:
        payload["form"] = {"email": email or "", "subscription": body.subscription}
    logger.info("checkout.submit context=%s status=%s", context, response.status_code)
    return JSONResponse(status_code=response.status_code, content=payload)
