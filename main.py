# main.py
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import config
from app.infrastructure.api.errors import register_error_handlers
from app.infrastructure.persistence.database import engine, init_db

# Importamos los routers de la capa de infraestructura
from app.infrastructure.api.routers import (
    clients_router,
    dgii_router,
    inventory_router,
    invoices_router,
    settings_router,
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')

app = FastAPI(
    title="API de Facturación Electrónica",
    description="Facturas, envío de e-CF a la DGII, PDF y correo para la empresa de fumigación.",
    version="1.0.0"
)

# Configuración de CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(invoices_router.router)
app.include_router(clients_router.router)
app.include_router(inventory_router.router)
app.include_router(dgii_router.router)
app.include_router(settings_router.router)

# En desarrollo los PDF y XML se sirven desde el mismo proceso
if config.STORAGE_BACKEND == "local":
    os.makedirs(config.LOCAL_STORAGE_DIR, exist_ok=True)
    app.mount("/files", StaticFiles(directory=config.LOCAL_STORAGE_DIR), name="files")

init_db(engine)


@app.get("/", tags=["Health Check"])
def read_root():
    return {"status": "ok", "message": "Bienvenido a la API de Facturación Electrónica"}
