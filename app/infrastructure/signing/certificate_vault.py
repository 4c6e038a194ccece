"""
Resguardo del certificado digital de la empresa.

El certificado y la clave privada se guardan cifrados con Fernet; la clave
de cifrado sale de la configuración, nunca del almacén de documentos.
"""
import base64
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Tuple

from cryptography import x509
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from app.domain.exceptions import SigningError
from app.domain.models.certificate import Certificate, CERTIFICATE_TYPE_DEVELOPMENT
from app.domain.ports.certificate_vault import CertificateVault

logger = logging.getLogger(__name__)

DEVELOPMENT_ISSUER = "Entidad Certificadora de Prueba"
DEVELOPMENT_SUBJECT = "Certificado de Desarrollo"


class FernetCertificateVault(CertificateVault):
    def __init__(self, encryption_key: str):
        if not encryption_key:
            raise ValueError("Falta la clave de cifrado del certificado (CERTIFICATE_ENCRYPTION_KEY)")
        derived = hashlib.sha256(encryption_key.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(derived))

    def encrypt(self, data: bytes) -> str:
        return self._fernet.encrypt(data).decode("ascii")

    def decrypt(self, token: str) -> bytes:
        try:
            return self._fernet.decrypt(token.encode("ascii"))
        except (InvalidToken, ValueError) as e:
            raise SigningError("No se pudo descifrar el certificado digital") from e

    def seal(self, certificate_pem: bytes, private_key_pem: bytes, password: str, **info) -> Certificate:
        """Arma el registro de certificado listo para guardarse."""
        return Certificate(
            certificate=self.encrypt(certificate_pem),
            private_key=self.encrypt(private_key_pem),
            password=password,
            **info
        )

    def open(self, certificate: Certificate) -> Tuple[bytes, bytes]:
        """Retorna (certificado PEM, clave privada PEM cifrada con la contraseña)."""
        return self.decrypt(certificate.certificate), self.decrypt(certificate.private_key)


def create_development_certificate(
    vault: FernetCertificateVault,
    company_name: str,
    rnc: str,
    password: str,
    valid_days: int = 365,
) -> Certificate:
    """
    Genera un certificado autofirmado para desarrollo. Sirve para firmar y
    verificar localmente; la DGII no lo acepta.
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    subject = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "DO"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, company_name or "Empresa de Prueba"),
        x509.NameAttribute(NameOID.SERIAL_NUMBER, rnc or "000000000"),
        x509.NameAttribute(NameOID.COMMON_NAME, DEVELOPMENT_SUBJECT),
    ])
    issuer = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, DEVELOPMENT_ISSUER)])

    valid_from = datetime.now(timezone.utc).replace(microsecond=0)
    valid_to = valid_from + timedelta(days=valid_days)
    serial_number = x509.random_serial_number()

    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(private_key.public_key())
        .serial_number(serial_number)
        .not_valid_before(valid_from - timedelta(minutes=5))
        .not_valid_after(valid_to)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True, content_commitment=True, key_encipherment=False,
                data_encipherment=False, key_agreement=False, key_cert_sign=False,
                crl_sign=False, encipher_only=False, decipher_only=False,
            ),
            critical=True,
        )
        .sign(private_key, hashes.SHA256())
    )

    password = password or secrets.token_urlsafe(12)
    certificate_pem = cert.public_bytes(serialization.Encoding.PEM)
    private_key_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
    )

    logger.info(f"Certificado de desarrollo creado para RNC {rnc} (serie {serial_number:x})")
    return vault.seal(
        certificate_pem,
        private_key_pem,
        password,
        issuer=DEVELOPMENT_ISSUER,
        subject=DEVELOPMENT_SUBJECT,
        serial_number=format(serial_number, "x"),
        valid_from=valid_from,
        valid_to=valid_to,
        type=CERTIFICATE_TYPE_DEVELOPMENT,
    )
