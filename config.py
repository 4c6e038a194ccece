# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# --- BASE DE DATOS ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./facturacion.db")

# --- CONFIGURACIÓN DE GOOGLE ---
# Alcances requeridos por las APIs de Google
SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/devstorage.read_write",
    "https://www.googleapis.com/auth/gmail.send"
]

CLIENT_SECRETS_FILE = 'credentials.json'
TOKEN_FILE = os.getenv("GOOGLE_TOKEN_FILE", 'token.json')

# ID de cliente OAuth con el que el frontend obtiene los ID tokens
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")

# --- ALMACENAMIENTO DE ARCHIVOS ---
# 'gcs' usa Google Cloud Storage, 'local' guarda en disco (desarrollo)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
GCS_BUCKET = os.getenv("GCS_BUCKET", "fumigacion-facturas")
LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "./storage")
LOCAL_STORAGE_BASE_URL = os.getenv("LOCAL_STORAGE_BASE_URL", "http://localhost:8000/files")

PDF_UPLOAD_ATTEMPTS = 3
PDF_UPLOAD_RETRY_DELAY = 1.0

# --- CONFIGURACIÓN DE GMAIL ---
EMAIL_SENDER = os.getenv("EMAIL_SENDER", "facturacion@example.com")
DEFAULT_COMPANY_NAME = 'Sistema de Facturación'

# --- CERTIFICADO DIGITAL ---
CERTIFICATE_ENCRYPTION_KEY = os.getenv("CERTIFICATE_ENCRYPTION_KEY", "default-encryption-key")

# --- DGII ---
DGII_USERNAME = os.getenv("DGII_USERNAME", "")
DGII_PASSWORD = os.getenv("DGII_PASSWORD", "")
DGII_BASE_URL = os.getenv("DGII_BASE_URL", "https://ecf.dgii.gov.do")
DGII_TIMEOUT = 30
DGII_PROBE_TIMEOUT = 5
# Resultado que devuelve el simulador al consultar el estado
DGII_SIMULATED_STATUS = os.getenv("DGII_SIMULATED_STATUS", "Aceptado")

# --- INVENTARIO ---
LOW_STOCK_THRESHOLD = 10
EXPIRING_WITHIN_DAYS = 30

# --- CELERY ---
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "pubsub://")
CELERY_PUBSUB_TOPIC = os.getenv("CELERY_PUBSUB_TOPIC", "fumigacion-facturas-eventos")

# --- CORS ---
CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]
