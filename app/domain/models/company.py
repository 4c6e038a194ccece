# app/domain/models/company.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class CompanySettings(BaseModel):
    """Datos del emisor. Sólo se leen al generar XML, PDF y correos."""
    name: Optional[str] = None
    rnc: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EcfConfig(BaseModel):
    test_mode: bool = True
