# app/infrastructure/api/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.exceptions import InvoicingError, InvalidArgument, InternalError

logger = logging.getLogger(__name__)


def error_response(error: InvoicingError) -> JSONResponse:
    return JSONResponse(status_code=error.http_status, content={"success": False, "error": error.to_dict()})


async def invoicing_error_handler(request: Request, exc: InvoicingError) -> JSONResponse:
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return error_response(InvalidArgument(f"Datos inválidos: {details}"))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Error no controlado en {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(InternalError("Ha ocurrido un error inesperado. Intente de nuevo."))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvoicingError, invoicing_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
