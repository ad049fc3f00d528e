"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn avec workers uvicorn) importe `checkout.asgi:app`.
- Toute la configuration FastAPI est centralisée dans checkout.app.
"""

from checkout.app import app
