from fastapi import APIRouter, Request

from checkout.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/stripe")
def health_stripe(request: Request):
    """
    État de la configuration de paiement (aucun secret exposé).
    - secret_key_configured: booléen uniquement
    - contexts / plans: identifiants de contexte configurés
    """
    settings = getattr(request.app.state, "settings", None)
    amounts = getattr(request.app.state, "amounts", None)
    return {
        "secret_key_configured": bool(settings and settings.stripe_secret_key),
        "public_key_configured": bool(settings and settings.stripe_public_key),
        "contexts": amounts.contexts() if amounts else [],
        "plans": sorted(settings.plans) if settings else [],
        "rate_limit": rate_limit_health_info(request),
    }
