"""
Cas d'usage 'checkout': orchestre intake, authentification, contexte et passerelle.

Étapes (dans cet ordre, chacune peut court-circuiter avec un Failed):
  1) intake: email + token présents et bien formés, choix du flux
  2) authenticate: l'abonnement exige un utilisateur connecté (configurable)
  3) resolve_context: montant (AmountAuthority) ou plan du contexte
  4) dispatch: TransactionRouter -> client Stripe puis charge OU abonnement
Au plus deux appels à la passerelle par soumission, aucun avant l'étape 4.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .amounts import AmountAuthority
from .charges import ChargeProcessor
from .customers import CustomerProvisioner
from .errors import ConfigurationError, ErrorKind
from .intake import validate_submission
from .models import (
    ChargeFlow,
    ChargeSucceeded,
    CheckoutSubmission,
    Failed,
    Flow,
    FlowKind,
    PlanReference,
    SubscriptionCreated,
    SubscriptionFlow,
    TransactionResult,
    ValidatedSubmission,
)
from .subscriptions import SubscriptionProvisioner

logger = logging.getLogger(__name__)


class TransactionRouter:
    """
    Provisionne le client puis exécute exactement une des deux transactions.
    Un échec du provisionnement court-circuite: pas de second appel.
    Un client créé sans charge/abonnement n'est pas supprimé (sans effet côté Stripe).
    """

    def __init__(
        self,
        provisioner: CustomerProvisioner,
        charges: ChargeProcessor,
        subscriptions: SubscriptionProvisioner,
    ):
        self._provisioner = provisioner
        self._charges = charges
        self._subscriptions = subscriptions

    def route(self, submission: ValidatedSubmission, flow: Flow) -> TransactionResult:
        customer = self._provisioner.provision(submission.email, submission.payment_token)
        if isinstance(customer, Failed):
            return customer

        if isinstance(flow, ChargeFlow):
            res = self._charges.charge(customer, flow.amount)
            return res if isinstance(res, Failed) else ChargeSucceeded(charge_id=res)

        res = self._subscriptions.subscribe(customer, flow.plan)
        return res if isinstance(res, Failed) else SubscriptionCreated(subscription_id=res)


@dataclass(frozen=True)
class CheckoutState:
    submission: CheckoutSubmission
    context: str
    user: Optional[Dict[str, Any]] = None
    validated: Optional[ValidatedSubmission] = None
    flow: Optional[Flow] = None
    result: Optional[TransactionResult] = None


Stage = Callable[[CheckoutState], Union[CheckoutState, Failed]]


def intake_stage(state: CheckoutState) -> Union[CheckoutState, Failed]:
    validated = validate_submission(state.submission)
    if isinstance(validated, Failed):
        return validated
    return replace(state, validated=validated)


def make_authenticate_stage(require_auth_for_subscriptions: bool = True) -> Stage:
    def authenticate_stage(state: CheckoutState) -> Union[CheckoutState, Failed]:
        if state.validated.flow is FlowKind.SUBSCRIPTION and require_auth_for_subscriptions:
            if not (state.user or {}).get("id"):
                return Failed(kind=ErrorKind.AUTHENTICATION, message="Veuillez vous connecter pour vous abonner")
        return state
    return authenticate_stage


def make_resolve_context_stage(amounts: AmountAuthority, plans: Mapping[str, str]) -> Stage:
    def resolve_context_stage(state: CheckoutState) -> Union[CheckoutState, Failed]:
        try:
            if state.validated.flow is FlowKind.CHARGE:
                return replace(state, flow=ChargeFlow(amount=amounts.resolve(state.context)))

            plan_id = plans.get(state.context)
            if not plan_id:
                raise ConfigurationError(f"Aucun plan configuré pour le contexte '{state.context}'")
        except ConfigurationError as e:
            return Failed(kind=ErrorKind.CONFIGURATION, message=str(e))

        # Le plan du contexte fait autorité; un plan différent côté client est refusé
        requested = (state.submission.plan_id or "").strip()
        if requested and requested != plan_id:
            return Failed(kind=ErrorKind.VALIDATION, message="Plan inconnu pour cette offre", missing_field="plan_id")
        return replace(state, flow=SubscriptionFlow(plan=PlanReference(plan_id=plan_id)))
    return resolve_context_stage


def make_dispatch_stage(router: TransactionRouter) -> Stage:
    def dispatch_stage(state: CheckoutState) -> Union[CheckoutState, Failed]:
        return replace(state, result=router.route(state.validated, state.flow))
    return dispatch_stage


class CheckoutPipeline:
    """Enchaîne les étapes; le premier Failed rencontré devient le résultat."""

    def __init__(self, stages: Sequence[Stage]):
        self._stages: List[Stage] = list(stages)

    def run(
        self,
        submission: CheckoutSubmission,
        context: str,
        user: Optional[Dict[str, Any]] = None,
    ) -> TransactionResult:
        state: Union[CheckoutState, Failed] = CheckoutState(submission=submission, context=context, user=user)
        for stage in self._stages:
            state = stage(state)
            if isinstance(state, Failed):
                logger.info("checkout.failed context=%s stage=%s kind=%s",
                            context, stage.__name__, state.kind.value)
                return state
        if state.result is None:
            raise RuntimeError("Pipeline de checkout sans étape de dispatch")
        return state.result


def build_pipeline(
    gateway,
    amounts: AmountAuthority,
    plans: Mapping[str, str],
    require_auth_for_subscriptions: bool = True,
) -> CheckoutPipeline:
    """Assemble le pipeline standard: intake -> authenticate -> resolve_context -> dispatch."""
    router = TransactionRouter(
        provisioner=CustomerProvisioner(gateway),
        charges=ChargeProcessor(gateway),
        subscriptions=SubscriptionProvisioner(gateway),
    )
    return CheckoutPipeline([
        intake_stage,
        make_authenticate_stage(require_auth_for_subscriptions),
        make_resolve_context_stage(amounts, plans),
        make_dispatch_stage(router),
    ])
