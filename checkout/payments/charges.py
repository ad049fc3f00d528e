"""
Paiement unique: débite un client provisionné du montant faisant autorité.
"""
import logging
from typing import Union

from .errors import GatewayError, classify_gateway_error, user_message
from .models import AmountSpec, Failed, GatewayCustomer

logger = logging.getLogger(__name__)


class ChargeProcessor:
    def __init__(self, gateway):
        self._gateway = gateway

    def charge(self, customer: GatewayCustomer, amount_spec: AmountSpec) -> Union[str, Failed]:
        """
        Crée la charge Stripe et retourne son identifiant, tel quel.
        Le montant part en unités mineures (int), jamais converti.
        """
        res = self._gateway.create_charge(
            customer_id=customer.id,
            amount=amount_spec.amount.value,
            currency=amount_spec.currency,
            description=amount_spec.description,
        )
        if isinstance(res, GatewayError):
            kind = classify_gateway_error(res)
            logger.warning(
                "charge failed customer_id=%s kind=%s category=%s message=%s",
                customer.id, kind.value, res.category, res.message,
            )
            return Failed(kind=kind, message=user_message(res))
        logger.info("charge ok customer_id=%s charge_id=%s amount=%s %s",
                    customer.id, res["id"], amount_spec.amount, amount_spec.currency)
        return res["id"]
