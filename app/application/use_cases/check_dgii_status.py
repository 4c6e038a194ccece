# app/application/use_cases/check_dgii_status.py
from typing import Optional

from app.domain.models.caller import CallerIdentity
from app.domain.models.company import EcfConfig
from app.domain.ports.dgii_gateway import DGIIGateway
from app.domain.ports.invoicing_repository import InvoicingRepository
from .common import require_caller, operation


class CheckDGIIStatusUseCase:
    """Sondeo liviano de disponibilidad de los servicios de la DGII."""

    def __init__(self, invoicing_repo: InvoicingRepository, live_gateway: DGIIGateway):
        self.invoicing_repo = invoicing_repo
        self.live_gateway = live_gateway

    @operation("checkDGIIStatus")
    def execute(self, caller: Optional[CallerIdentity]) -> dict:
        require_caller(caller)
        ecf_config = self.invoicing_repo.get_ecf_config() or EcfConfig()
        status = self.live_gateway.probe(ecf_config.test_mode)
        return {
            "status": status.status,
            "testMode": status.test_mode,
            "message": status.message
        }
