"""
AgriFusion API - Sagas de mutación multi-paso sobre Supabase.

Expone la vinculación agricultor -> consultor, la finalización del registro
de consultores, el listado de agricultores sin asignar y las operaciones de
notificaciones del destinatario.
"""

import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import (
    consultant_router,
    farmers_router,
    health_router,
    notifications_router,
)
from app.config import settings
from app.errors import register_exception_handlers
from infrastructure.logging import setup_logging_middleware

logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title="AgriFusion API",
    description="Sagas de vinculación y registro con notificaciones sobre Supabase",
    version="1.0.0",
)

# Logging estructurado + correlation IDs
setup_logging_middleware(app, level=settings.log_level, service_name=settings.service_name)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(farmers_router)
app.include_router(consultant_router)
app.include_router(notifications_router)

logger.info(f"🚀 {settings.service_name} inicializado")


if __name__ == "__main__":
    server_host = os.getenv("SERVER_HOST", "127.0.0.1")
    uvicorn.run(
        "main:app",
        host=server_host,
        port=settings.service_port,
        reload=os.getenv("UVICORN_RELOAD", "false").lower() == "true",
        log_level=settings.log_level.lower(),
    )
