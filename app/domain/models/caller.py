# app/domain/models/caller.py
from pydantic import BaseModel
from typing import Optional


class CallerIdentity(BaseModel):
    """Identidad autenticada de quien invoca una operación."""
    uid: str
    email: Optional[str] = None


# Identidad con la que corren los procesos automáticos (trigger de creación)
SYSTEM_CALLER = CallerIdentity(uid="system")
