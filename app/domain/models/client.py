# app/domain/models/client.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class Client(BaseModel):
    id: str
    name: str
    rnc: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
