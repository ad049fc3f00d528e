# module checkout.app
from fastapi import FastAPI

from checkout.app_setup.lifespan import lifespan
from checkout.app_setup.middlewares import (
    register_basic_middlewares,
    register_security_middleware,
    register_no_cache_middleware,
)
from checkout.app_setup.exceptions import register_exception_handlers
from checkout.app_setup.routers import register_routers

def create_app() -> FastAPI:
    """
    Crée et configure l’instance FastAPI du service de paiement.
    Étapes et ordre:
      1) register_basic_middlewares: CORS, TrustedHost.
      2) register_security_middleware: en-têtes de sécurité + CSP (widget Stripe).
      3) register_no_cache_middleware: aucune mise en cache des réponses de checkout.
      4) register_exception_handlers: 401 HTML -> redirection, erreurs de configuration opaques.
      5) register_routers: API checkout et health.
    La configuration (montants, plans, clé Stripe) est chargée dans le lifespan.
    """
    app = FastAPI(title="Checkout API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app

# App globale
app = create_app()
