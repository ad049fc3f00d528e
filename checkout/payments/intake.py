"""
Premier filtre du checkout: email et token de paiement présents et bien formés.
Aucun appel réseau ici.
"""
import re
from typing import Union

from .errors import ErrorKind
from .models import CheckoutSubmission, Failed, FlowKind, ValidatedSubmission

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_TOKEN_RE = re.compile(r"^\S+$")

# module checkout.payments.intake
def _invalid(field: str, message: str) -> Failed:
    return Failed(kind=ErrorKind.VALIDATION, message=message, missing_field=field)


def validate_submission(submission: CheckoutSubmission) -> Union[ValidatedSubmission, Failed]:
    """
    Valide un formulaire de checkout.
    - email: requis, format local@domaine.tld
    - payment_token: requis, opaque, sans espace
    - subscription: fixe le flux (CHARGE ou SUBSCRIPTION) pour la suite du traitement
    Retour: ValidatedSubmission, ou Failed(VALIDATION) avec le champ fautif.
    """
    email = (submission.email or "").strip()
    if not email:
        return _invalid("email", "Adresse email requise")
    if not _EMAIL_RE.match(email):
        return _invalid("email", "Adresse email invalide")

    token = (submission.payment_token or "").strip()
    if not token:
        return _invalid("payment_token", "Informations de paiement manquantes")
    if not _TOKEN_RE.match(token):
        return _invalid("payment_token", "Informations de paiement invalides")

    flow = FlowKind.SUBSCRIPTION if submission.subscription else FlowKind.CHARGE
    return ValidatedSubmission(email=email, payment_token=token, flow=flow)
