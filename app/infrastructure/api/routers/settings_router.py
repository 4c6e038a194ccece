# app/infrastructure/api/routers/settings_router.py
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.application.use_cases.company_settings import CompanySettingsUseCase
from app.domain.models.caller import CallerIdentity
from app.domain.models.company import CompanySettings, EcfConfig
from app.infrastructure.api import dependencies as deps
from app.infrastructure.api.auth import get_caller

router = APIRouter(prefix="/api/v1", tags=["Configuración"])


class EcfConfigRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_mode: bool = Field(alias="testMode")


class DevelopmentCertificateRequest(BaseModel):
    password: Optional[str] = None


@router.get("/company", response_model=CompanySettings, summary="Datos de la empresa")
def get_company(
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CompanySettingsUseCase = Depends(deps.get_company_settings),
):
    return use_case.get_company(caller)


@router.put("/company", response_model=CompanySettings, summary="Actualizar los datos de la empresa")
def save_company(
    company: CompanySettings,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CompanySettingsUseCase = Depends(deps.get_company_settings),
):
    return use_case.save_company(caller, company)


@router.get("/ecf/config", summary="Configuración de facturación electrónica")
def get_ecf_config(
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CompanySettingsUseCase = Depends(deps.get_company_settings),
):
    return use_case.get_ecf_config(caller)


@router.put("/ecf/config", summary="Cambiar entre modo prueba y producción")
def save_ecf_config(
    body: EcfConfigRequest,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CompanySettingsUseCase = Depends(deps.get_company_settings),
):
    return use_case.save_ecf_config(caller, EcfConfig(test_mode=body.test_mode))


@router.post("/ecf/development-certificate", status_code=201, summary="Crear un certificado de desarrollo")
def create_development_certificate(
    body: Optional[DevelopmentCertificateRequest] = None,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CompanySettingsUseCase = Depends(deps.get_company_settings),
):
    return use_case.create_development_certificate(caller, body.password if body else None)
