"""
Types du checkout (transitoires, jamais persistés).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import ErrorKind
from .money import MinorUnits


class FlowKind(str, Enum):
    CHARGE = "charge"
    SUBSCRIPTION = "subscription"


@dataclass(frozen=True)
class CheckoutSubmission:
    """Formulaire brut reçu de la couche web (aucun montant: il ne vient jamais du client)."""
    email: Optional[str]
    payment_token: Optional[str]
    subscription: bool = False
    plan_id: Optional[str] = None


@dataclass(frozen=True)
class ValidatedSubmission:
    email: str
    payment_token: str
    flow: FlowKind


@dataclass(frozen=True)
class AmountSpec:
    amount: MinorUnits
    currency: str
    description: str


@dataclass(frozen=True)
class PlanReference:
    plan_id: str


@dataclass(frozen=True)
class GatewayCustomer:
    id: str
    email: str


# --- Flux choisi une seule fois puis transporté jusqu'au routeur ---

@dataclass(frozen=True)
class ChargeFlow:
    amount: AmountSpec


@dataclass(frozen=True)
class SubscriptionFlow:
    plan: PlanReference


Flow = Union[ChargeFlow, SubscriptionFlow]


# --- Résultats ---

@dataclass(frozen=True)
class ChargeSucceeded:
    charge_id: str


@dataclass(frozen=True)
class SubscriptionCreated:
    subscription_id: str


@dataclass(frozen=True)
class Failed:
    kind: ErrorKind
    message: str
    missing_field: Optional[str] = None


TransactionResult = Union[ChargeSucceeded, SubscriptionCreated, Failed]
