# checkout.config
from pathlib import Path
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
import json
import os
from dotenv import load_dotenv

from checkout.payments.errors import ConfigurationError

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du service de paiement.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les URLs Supabase, CORS/hosts
- Les clés Stripe ne vivent que dans CheckoutSettings
- Construit CheckoutSettings: montants, descriptions et plans par contexte,
  chargés une seule fois au démarrage et jamais modifiés ensuite
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _flag(v: str, default: bool) -> bool:
    v = _clean_env(v).lower()
    if not v:
        return default
    return v in ("1", "true", "yes", "on")

# Supabase: uniquement pour retrouver l'utilisateur connecté (email)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or "")
if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
SUPABASE_URL = SUPABASE_URL.rstrip("/")

COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

DEFAULT_CURRENCY = "usd"
DEFAULT_STRIPE_TIMEOUT = 10.0


@dataclass(frozen=True)
class CheckoutSettings:
    """
    Configuration immuable du checkout, injectée dans les composants.
    Les tables sont indexées par identifiant de contexte (ex: "default").
    """
    amounts: Mapping[str, int]
    descriptions: Mapping[str, str]
    plans: Mapping[str, str]
    currencies: Mapping[str, str]
    default_currency: str = DEFAULT_CURRENCY
    stripe_secret_key: str = field(default="", repr=False)
    stripe_public_key: str = ""
    stripe_timeout: float = DEFAULT_STRIPE_TIMEOUT
    require_auth_for_subscriptions: bool = True


def _parse_table(environ: Mapping[str, str], name: str) -> Dict[str, Any]:
    raw = _clean_env(environ.get(name) or "")
    if not raw:
        return {}
    try:
        table = json.loads(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name}: JSON invalide ({e})")
    if not isinstance(table, dict):
        raise ConfigurationError(f"{name}: objet JSON attendu {{\"contexte\": valeur}}")
    return {str(k).strip(): v for k, v in table.items() if str(k).strip()}


def _parse_amounts(environ: Mapping[str, str]) -> Dict[str, int]:
    amounts: Dict[str, int] = {}
    for context, value in _parse_table(environ, "CHECKOUT_AMOUNTS").items():
        # Montants en unités mineures uniquement: 5.0 ou "5.00" sont refusés
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"CHECKOUT_AMOUNTS[{context}]: entier en unités mineures attendu")
        if value <= 0:
            raise ConfigurationError(f"CHECKOUT_AMOUNTS[{context}]: montant strictement positif attendu")
        amounts[context] = value
    return amounts


def _parse_strings(environ: Mapping[str, str], name: str, lower: bool = False) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for context, value in _parse_table(environ, name).items():
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"{name}[{context}]: chaîne non vide attendue")
        out[context] = value.strip().lower() if lower else value.strip()
    return out


def load_checkout_settings(environ: Optional[Mapping[str, str]] = None) -> CheckoutSettings:
    """
    Lit la configuration du checkout depuis l'environnement.
    - CHECKOUT_AMOUNTS='{"default": 500}' (unités mineures)
    - CHECKOUT_DESCRIPTIONS='{"default": "Abonnement"}'
    - CHECKOUT_PLANS='{"default": "plan_9999"}'
    - CHECKOUT_CURRENCIES='{"jp": "jpy"}' (optionnel, sinon CHECKOUT_CURRENCY)
    Soulève ConfigurationError si une valeur est invalide (défaut de déploiement).
    """
    env = os.environ if environ is None else environ
    try:
        timeout = float(_clean_env(env.get("STRIPE_TIMEOUT_SECONDS") or "") or DEFAULT_STRIPE_TIMEOUT)
    except ValueError:
        raise ConfigurationError("STRIPE_TIMEOUT_SECONDS: nombre attendu")
    if timeout <= 0:
        raise ConfigurationError("STRIPE_TIMEOUT_SECONDS: valeur strictement positive attendue")

    return CheckoutSettings(
        amounts=MappingProxyType(_parse_amounts(env)),
        descriptions=MappingProxyType(_parse_strings(env, "CHECKOUT_DESCRIPTIONS")),
        plans=MappingProxyType(_parse_strings(env, "CHECKOUT_PLANS")),
        currencies=MappingProxyType(_parse_strings(env, "CHECKOUT_CURRENCIES", lower=True)),
        default_currency=(_clean_env(env.get("CHECKOUT_CURRENCY") or "") or DEFAULT_CURRENCY).lower(),
        stripe_secret_key=_clean_env(env.get("STRIPE_SECRET_KEY") or ""),
        stripe_public_key=_clean_env(env.get("STRIPE_PUBLIC_KEY") or ""),
        stripe_timeout=timeout,
        require_auth_for_subscriptions=_flag(env.get("CHECKOUT_REQUIRE_AUTH_FOR_SUBSCRIPTIONS") or "", True),
    )
