"""
Firma XMLDSig de los e-CF y de las solicitudes de anulación.

- Firma enveloped sobre el elemento raíz
- SignatureMethod: RSA-SHA256, Digest: SHA-256
- Canonicalization: Exclusive XML Canonicalization (exc-c14n)
- X509Certificate en KeyInfo
"""
import logging

from lxml import etree
from cryptography.hazmat.primitives import serialization
from signxml import XMLSigner as SignXMLSigner, XMLVerifier, methods
from signxml.algorithms import SignatureMethod, DigestAlgorithm, CanonicalizationMethod
from signxml.exceptions import SignXMLException

from app.domain.exceptions import SigningError
from app.domain.ports.xml_signer import XMLSigner

logger = logging.getLogger(__name__)


def load_private_key(private_key_pem: bytes, password: str):
    try:
        return serialization.load_pem_private_key(
            private_key_pem,
            password=password.encode("utf-8") if password else None,
        )
    except (ValueError, TypeError) as e:
        raise SigningError(f"No se pudo leer la clave privada del certificado: {e}") from e


class XMLDSigSigner(XMLSigner):

    def sign(self, xml_string: str, certificate_pem: bytes, private_key_pem: bytes, password: str) -> str:
        try:
            root = etree.fromstring(xml_string.encode("utf-8"))
        except etree.XMLSyntaxError as e:
            raise SigningError(f"Error al parsear XML: {e}") from e

        private_key = load_private_key(private_key_pem, password)

        signer = SignXMLSigner(
            method=methods.enveloped,
            signature_algorithm=SignatureMethod.RSA_SHA256,
            digest_algorithm=DigestAlgorithm.SHA256,
            c14n_algorithm=CanonicalizationMethod.EXCLUSIVE_XML_CANONICALIZATION_1_0,
        )
        try:
            signed_root = signer.sign(
                root,
                key=private_key,
                cert=certificate_pem.decode("utf-8"),
                always_add_key_value=False,
            )
        except (SignXMLException, ValueError) as e:
            raise SigningError(f"Error al firmar XML: {e}") from e

        logger.info(f"Documento <{etree.QName(root).localname}> firmado con XMLDSig")
        return etree.tostring(signed_root, xml_declaration=True, encoding="UTF-8").decode("utf-8")

    def verify(self, signed_xml: str, certificate_pem: bytes) -> bool:
        try:
            XMLVerifier().verify(signed_xml.encode("utf-8"), x509_cert=certificate_pem.decode("utf-8"))
            return True
        except (SignXMLException, etree.XMLSyntaxError, ValueError) as e:
            logger.warning(f"Firma XML inválida: {e}")
            return False
