# app/domain/ports/certificate_vault.py
from abc import ABC, abstractmethod
from typing import Tuple

from app.domain.models.certificate import Certificate


class CertificateVault(ABC):
    """Puerto para abrir el certificado digital guardado cifrado."""
    @abstractmethod
    def open(self, certificate: Certificate) -> Tuple[bytes, bytes]:
        """
        Retorna (certificado PEM, clave privada PEM cifrada con la contraseña).
        Lanza SigningError si no se puede descifrar.
        """
        pass
