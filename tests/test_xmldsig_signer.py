import pytest
from lxml import etree

from app.domain.exceptions import SigningError
from app.domain.services.ecf_xml import build_invoice_xml
from conftest import make_invoice

DSIG_NS = "http://www.w3.org/2000/09/xmldsig#"


@pytest.fixture
def keys(vault, certificate):
    return vault.open(certificate)


@pytest.fixture
def invoice_xml(company, client_record):
    return build_invoice_xml(make_invoice(), company, client_record)


def test_sign_and_verify(signer, keys, certificate, invoice_xml):
    certificate_pem, private_key_pem = keys
    signed = signer.sign(invoice_xml, certificate_pem, private_key_pem, certificate.password)

    root = etree.fromstring(signed.encode("utf-8"))
    signature = root.find(f"{{{DSIG_NS}}}Signature")
    assert signature is not None
    method = signature.find(f"{{{DSIG_NS}}}SignedInfo/{{{DSIG_NS}}}SignatureMethod")
    assert method.get("Algorithm") == "http://www.w3.org/2001/04/xmldsig-more#rsa-sha256"
    assert signature.find(f".//{{{DSIG_NS}}}X509Certificate") is not None

    assert signer.verify(signed, certificate_pem)


def test_tampered_document_fails_verification(signer, keys, certificate, invoice_xml):
    certificate_pem, private_key_pem = keys
    signed = signer.sign(invoice_xml, certificate_pem, private_key_pem, certificate.password)

    tampered = signed.replace("4484.00", "1.00")
    assert tampered != signed
    assert not signer.verify(tampered, certificate_pem)


def test_wrong_password_raises_signing_error(signer, keys, invoice_xml):
    certificate_pem, private_key_pem = keys
    with pytest.raises(SigningError):
        signer.sign(invoice_xml, certificate_pem, private_key_pem, "otra-clave")


def test_malformed_xml_raises_signing_error(signer, keys, certificate):
    certificate_pem, private_key_pem = keys
    with pytest.raises(SigningError):
        signer.sign("<ECF>", certificate_pem, private_key_pem, certificate.password)
