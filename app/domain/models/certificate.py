# app/domain/models/certificate.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

CERTIFICATE_TYPE_PRODUCTION = "PRODUCCION"
CERTIFICATE_TYPE_DEVELOPMENT = "DESARROLLO"


class Certificate(BaseModel):
    """
    Certificado digital de la empresa (uno por empresa). El certificado y la
    clave privada se guardan cifrados; `password` protege la clave PEM.
    """
    certificate: str
    private_key: str
    password: str
    issuer: Optional[str] = None
    subject: Optional[str] = None
    serial_number: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    type: str = CERTIFICATE_TYPE_PRODUCTION

    model_config = ConfigDict(from_attributes=True)

    def is_valid_at(self, moment: datetime) -> bool:
        if self.valid_from and moment < self.valid_from:
            return False
        if self.valid_to and moment > self.valid_to:
            return False
        return True


def is_development_certificate(certificate: Optional[Certificate]) -> bool:
    return certificate is not None and certificate.type == CERTIFICATE_TYPE_DEVELOPMENT
