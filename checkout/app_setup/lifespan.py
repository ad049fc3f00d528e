"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Charge CheckoutSettings une seule fois et assemble le pipeline de checkout
  (app.state.settings, app.state.amounts, app.state.pipeline). Aucun rechargement
  sans redémarrage du processus.
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
Variables d’environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive le rate limiting (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l’init échoue
"""
import os
import logging
import redis.asyncio as redis
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from checkout.config import load_checkout_settings
from checkout.payments import AmountAuthority, StripeGateway, build_pipeline, configure_stripe
from checkout.payments.errors import ConfigurationError

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")

def init_checkout(app: FastAPI) -> None:
    """Construit les composants du checkout à partir de l'environnement (échec = arrêt du démarrage)."""
    try:
        settings = load_checkout_settings()
    except ConfigurationError as e:
        logger.error("Configuration checkout invalide: %s", e)
        raise
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY manquant: les appels Stripe échoueront")
    configure_stripe(settings.stripe_timeout)
    amounts = AmountAuthority.from_settings(settings)
    app.state.settings = settings
    app.state.amounts = amounts
    app.state.pipeline = build_pipeline(
        gateway=StripeGateway(settings.stripe_secret_key),
        amounts=amounts,
        plans=settings.plans,
        require_auth_for_subscriptions=settings.require_auth_for_subscriptions,
    )
    logger.info("Checkout ready contexts=%s plans=%s", amounts.contexts(), sorted(settings.plans))

async def init_rate_limiter(app: FastAPI) -> None:
    """
    Configure le rate limiting et gère les fallbacks.
    - En cas d’échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    """
    try:
        if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
            app.state.rate_limit_enabled = False
            logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
            return

        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            app.state.rate_limit_enabled = False
            logger.warning(f"Rate limiting disabled due to init error: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_checkout(app)
    await init_rate_limiter(app)
    yield
