"""
Gestionnaires d’exceptions.
- ConfigurationError non rattrapée: réponse opaque, détail uniquement dans les logs.
- Les HTTPException gardent le JSON standard de FastAPI {"detail": ...}.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from checkout.payments.errors import ConfigurationError
from checkout.payments.translator import CONFIGURATION_MESSAGE

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigurationError)
    async def opaque_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("Configuration error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": CONFIGURATION_MESSAGE})
