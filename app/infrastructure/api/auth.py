# app/infrastructure/api/auth.py
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

import config
from app.domain.models.caller import CallerIdentity

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def verify_google_id_token(token: str, audience: Optional[str]) -> CallerIdentity:
    """Valida un ID token de Google. Lanza ValueError si no es válido."""
    claims = id_token.verify_oauth2_token(token, google_requests.Request(), audience)
    return CallerIdentity(uid=claims["sub"], email=claims.get("email"))


def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[CallerIdentity]:
    """
    Identidad de quien llama, o None. Cada caso de uso decide qué hacer sin
    identidad (responden 'unauthenticated').
    """
    if credentials is None:
        return None
    try:
        return verify_google_id_token(credentials.credentials, config.GOOGLE_CLIENT_ID)
    except ValueError as e:
        logger.warning(f"ID token rechazado: {e}")
        return None
