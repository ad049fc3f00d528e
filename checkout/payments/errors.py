"""
Taxonomie des erreurs du checkout.
- ErrorKind: catégories internes stables (validation, carte, transport, configuration, authentification).
- GatewayError: erreur renvoyée (et non levée) par l'adaptateur Stripe.
- classify_gateway_error: rattache une GatewayError à une ErrorKind.
- ConfigurationError: seule exception du cœur, réservée aux défauts de déploiement.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Catégories de la passerelle (noms alignés sur les types d'erreurs Stripe)
CARD_ERROR = "card_error"
INVALID_REQUEST = "invalid_request"
API_ERROR = "api_error"
RATE_LIMIT = "rate_limit"
API_CONNECTION = "api_connection"
AUTHENTICATION = "authentication"

# Paramètres Stripe désignant l'instrument de paiement (token expiré/déjà utilisé)
_INSTRUMENT_PARAMS = {"source", "card"}


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    CARD = "card_error"
    TRANSPORT = "transport_error"
    CONFIGURATION = "configuration_error"
    AUTHENTICATION = "authentication_error"


class CheckoutError(Exception):
    """Base des exceptions du checkout."""
    kind: ErrorKind


class ConfigurationError(CheckoutError):
    """Montant, plan ou clé manquant(e): l'opérateur doit corriger le déploiement."""
    kind = ErrorKind.CONFIGURATION


@dataclass(frozen=True)
class GatewayError:
    category: str
    message: str
    param: Optional[str] = None


def classify_gateway_error(error: GatewayError) -> ErrorKind:
    """
    Rattache une erreur de passerelle à la taxonomie interne.
    - card_error, ou invalid_request sur source/card -> CARD (voir user_message)
    - api_connection, api_error, rate_limit -> TRANSPORT
    - autre invalid_request (plan/client inconnu), authentication -> CONFIGURATION
    """
    if error.category == CARD_ERROR:
        return ErrorKind.CARD
    if error.category == INVALID_REQUEST and (error.param or "") in _INSTRUMENT_PARAMS:
        return ErrorKind.CARD
    if error.category in (API_CONNECTION, API_ERROR, RATE_LIMIT):
        return ErrorKind.TRANSPORT
    return ErrorKind.CONFIGURATION


INSTRUMENT_MESSAGE = "Ce moyen de paiement n'est plus valide, veuillez ressaisir votre carte."


def user_message(error: GatewayError) -> str:
    """
    Message montrable à l'utilisateur pour une erreur classée CARD.
    Seuls les messages card_error sont rédigés pour l'utilisateur final;
    un invalid_request sur le token ("No such token: ...") reste dans les logs.
    """
    if error.category == CARD_ERROR:
        return error.message
    if error.category == INVALID_REQUEST and (error.param or "") in _INSTRUMENT_PARAMS:
        return INSTRUMENT_MESSAGE
    return error.message
