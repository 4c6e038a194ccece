# app/infrastructure/api/routers/dgii_router.py
from typing import Optional

from fastapi import APIRouter, Depends

from app.application.use_cases.check_dgii_status import CheckDGIIStatusUseCase
from app.domain.models.caller import CallerIdentity
from app.infrastructure.api import dependencies as deps
from app.infrastructure.api.auth import get_caller

router = APIRouter(prefix="/api/v1/dgii", tags=["DGII"])


@router.get("/status", summary="Disponibilidad de los servicios de la DGII")
def check_dgii_status(
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CheckDGIIStatusUseCase = Depends(deps.get_check_dgii_status),
):
    return use_case.execute(caller)
