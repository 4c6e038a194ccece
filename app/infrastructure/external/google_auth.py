# app/infrastructure/external/google_auth.py
import os
from typing import List
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials


def get_google_credentials(token_file: str, scopes: List[str]):
    """
    Carga las credenciales desde token.json y las refresca si expiraron.
    """
    if not os.path.exists(token_file):
        raise FileNotFoundError(f"El archivo '{token_file}' no se encontró.")

    creds = Credentials.from_authorized_user_file(token_file, scopes)

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())

    return creds
