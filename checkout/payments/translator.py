"""
Traduction des résultats du checkout en réponses pour l'appelant.
- Carte / validation: message montré tel quel, formulaire réaffiché
- Transport: message générique "réessayer", formulaire réaffiché
- Configuration: réponse opaque, détail uniquement dans les logs
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import ErrorKind
from .models import ChargeSucceeded, Failed, SubscriptionCreated, TransactionResult

logger = logging.getLogger(__name__)

TRANSPORT_MESSAGE = "Le service de paiement est momentanément indisponible, veuillez réessayer."
CONFIGURATION_MESSAGE = "Paiement impossible pour le moment."

_STATUS = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.CARD: 402,
    ErrorKind.TRANSPORT: 503,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.AUTHENTICATION: 401,
}


@dataclass(frozen=True)
class CheckoutResponse:
    status_code: int
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def redisplay(self) -> bool:
        return bool(self.payload.get("redisplay"))


def translate(result: TransactionResult) -> CheckoutResponse:
    if isinstance(result, ChargeSucceeded):
        return CheckoutResponse(200, {"status": "ok", "charge_id": result.charge_id})
    if isinstance(result, SubscriptionCreated):
        return CheckoutResponse(200, {"status": "ok", "subscription_id": result.subscription_id})
    return translate_failure(result)


def translate_failure(failure: Failed) -> CheckoutResponse:
    status = _STATUS.get(failure.kind, 500)
    payload: Dict[str, Any] = {"status": "error", "error": failure.kind.value}

    if failure.kind is ErrorKind.CARD:
        # Les messages Stripe sont conçus pour l'utilisateur final
        payload.update(detail=failure.message, redisplay=True)
    elif failure.kind is ErrorKind.VALIDATION:
        payload.update(detail=failure.message, field=failure.missing_field, redisplay=True)
    elif failure.kind is ErrorKind.TRANSPORT:
        payload.update(detail=TRANSPORT_MESSAGE, redisplay=True)
    elif failure.kind is ErrorKind.AUTHENTICATION:
        payload.update(detail=failure.message, redisplay=False)
    else:
        logger.error("checkout configuration error: %s", failure.message)
        payload.update(error=ErrorKind.CONFIGURATION.value, detail=CONFIGURATION_MESSAGE, redisplay=False)
    return CheckoutResponse(status, payload)
