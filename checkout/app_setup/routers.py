"""
Registre central des routers (API checkout, health).
"""
from fastapi import FastAPI
from checkout.payments import views as payments_views
from checkout.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(payments_views.router)
    app.include_router(health_router)
