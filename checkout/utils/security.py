import logging
from typing import Any, Dict, Optional
from fastapi import Request

from checkout.infra import supabase_client

logger = logging.getLogger(__name__)

COOKIE_NAME = "sb_access"

def _access_token(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(COOKIE_NAME) or None

def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """
    Utilisateur connecté {id, email} ou None.
    Le checkout ne consomme que deux informations: connecté oui/non, et l'email.
    Toute erreur de lecture de session équivaut à "non connecté".
    """
    token = _access_token(request)
    if not token:
        return None
    try:
        user = supabase_client.get_user_from_access_token(token)
    except Exception as e:
        logger.warning("Lecture de session impossible: %s", e.__class__.__name__)
        return None
    if not user.get("id"):
        return None
    return {"id": user.get("id"), "email": user.get("email")}
