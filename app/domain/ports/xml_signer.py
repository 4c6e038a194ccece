# app/domain/ports/xml_signer.py
from abc import ABC, abstractmethod


class XMLSigner(ABC):
    """Puerto para la firma digital de los documentos XML."""

    @abstractmethod
    def sign(self, xml_string: str, certificate_pem: bytes, private_key_pem: bytes, password: str) -> str:
        """Retorna el XML con el bloque de firma incrustado."""
        pass

    @abstractmethod
    def verify(self, signed_xml: str, certificate_pem: bytes) -> bool:
        """True si la firma es válida para ese certificado y el documento no fue alterado."""
        pass
