# app/application/use_cases/company_settings.py
import logging
from typing import Optional, Callable

from app.domain.exceptions import FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.models.certificate import Certificate
from app.domain.models.company import CompanySettings, EcfConfig
from app.domain.ports.invoicing_repository import InvoicingRepository
from .common import require_caller, operation

logger = logging.getLogger(__name__)

# (nombre de la empresa, rnc, contraseña) -> certificado listo para guardar
CertificateFactory = Callable[[str, str, Optional[str]], Certificate]


def certificate_summary(certificate: Optional[Certificate]) -> Optional[dict]:
    """Datos públicos del certificado; nunca incluye la clave ni la contraseña."""
    if certificate is None:
        return None
    return {
        "issuer": certificate.issuer,
        "subject": certificate.subject,
        "serialNumber": certificate.serial_number,
        "validFrom": certificate.valid_from,
        "validTo": certificate.valid_to,
        "type": certificate.type,
    }


class CompanySettingsUseCase:
    def __init__(self, invoicing_repo: InvoicingRepository, certificate_factory: Optional[CertificateFactory] = None):
        self.invoicing_repo = invoicing_repo
        self.certificate_factory = certificate_factory

    @operation("getCompanySettings")
    def get_company(self, caller: Optional[CallerIdentity]) -> CompanySettings:
        require_caller(caller)
        return self.invoicing_repo.get_company() or CompanySettings()

    @operation("saveCompanySettings")
    def save_company(self, caller: Optional[CallerIdentity], company: CompanySettings) -> CompanySettings:
        require_caller(caller)
        return self.invoicing_repo.save_company(company)

    @operation("getEcfConfig")
    def get_ecf_config(self, caller: Optional[CallerIdentity]) -> dict:
        require_caller(caller)
        ecf_config = self.invoicing_repo.get_ecf_config() or EcfConfig()
        return {
            "testMode": ecf_config.test_mode,
            "certificate": certificate_summary(self.invoicing_repo.get_certificate()),
        }

    @operation("saveEcfConfig")
    def save_ecf_config(self, caller: Optional[CallerIdentity], ecf_config: EcfConfig) -> dict:
        require_caller(caller)
        self.invoicing_repo.save_ecf_config(ecf_config)
        return self.get_ecf_config(caller)

    @operation("createDevelopmentCertificate")
    def create_development_certificate(self, caller: Optional[CallerIdentity], password: Optional[str] = None) -> dict:
        require_caller(caller)
        if self.certificate_factory is None:
            raise FailedPrecondition('No hay clave de cifrado configurada para guardar certificados.')
        company = self.invoicing_repo.get_company()
        if company is None or not company.rnc:
            raise FailedPrecondition('Configure el RNC de la empresa antes de crear un certificado.')

        certificate = self.certificate_factory(company.name, company.rnc, password)
        self.invoicing_repo.save_certificate(certificate)
        logger.info(f"Certificado de desarrollo guardado para la empresa {company.rnc}")
        return {"success": True, "certificate": certificate_summary(certificate)}
