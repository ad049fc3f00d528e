"""
Abonnement: rattache un client provisionné à un plan existant.
Montant et périodicité viennent du plan côté Stripe; aucun plan n'est créé ici.
"""
import logging
from typing import Union

from .errors import GatewayError, classify_gateway_error, user_message
from .models import Failed, GatewayCustomer, PlanReference

logger = logging.getLogger(__name__)


class SubscriptionProvisioner:
    def __init__(self, gateway):
        self._gateway = gateway

    def subscribe(self, customer: GatewayCustomer, plan: PlanReference) -> Union[str, Failed]:
        res = self._gateway.create_subscription(customer_id=customer.id, plan_id=plan.plan_id)
        if isinstance(res, GatewayError):
            kind = classify_gateway_error(res)
            logger.warning(
                "subscription failed customer_id=%s plan=%s kind=%s category=%s message=%s",
                customer.id, plan.plan_id, kind.value, res.category, res.message,
            )
            return Failed(kind=kind, message=user_message(res))
        logger.info("subscription ok customer_id=%s subscription_id=%s plan=%s",
                    customer.id, res["id"], plan.plan_id)
        return res["id"]
