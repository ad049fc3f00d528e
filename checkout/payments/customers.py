"""
Provisionnement du client Stripe: échange (email, token) contre un identifiant client.
Un appel = un nouveau client (pas de déduplication par email, pas de relance).
"""
import logging
from typing import Union

from .errors import GatewayError, classify_gateway_error, user_message
from .models import Failed, GatewayCustomer

logger = logging.getLogger(__name__)


class CustomerProvisioner:
    def __init__(self, gateway):
        self._gateway = gateway

    def provision(self, email: str, token: str) -> Union[GatewayCustomer, Failed]:
        res = self._gateway.create_customer(email=email, token=token)
        if isinstance(res, GatewayError):
            kind = classify_gateway_error(res)
            logger.warning("customer.provision failed kind=%s category=%s message=%s",
                           kind.value, res.category, res.message)
            return Failed(kind=kind, message=user_message(res))
        logger.info("customer.provision ok customer_id=%s", res["id"])
        return GatewayCustomer(id=res["id"], email=email)
