# app/application/use_cases/common.py
import functools
import logging
from datetime import datetime, timezone
from typing import Optional

from app.domain.exceptions import InvoicingError, InternalError, Unauthenticated, InvalidArgument, NotFound
from app.domain.models.caller import CallerIdentity
from app.domain.models.company import EcfConfig
from app.domain.models.invoice import Invoice
from app.domain.ports.invoicing_repository import InvoicingRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def require_caller(caller: Optional[CallerIdentity], message: str = "La función requiere autenticación") -> CallerIdentity:
    if caller is None:
        raise Unauthenticated(message)
    return caller


def load_invoice(repo: InvoicingRepository, invoice_id: str, not_found_message: str = "La factura especificada no existe.") -> Invoice:
    if not invoice_id:
        raise InvalidArgument("Se requiere ID de factura.")
    invoice = repo.find_invoice(invoice_id)
    if invoice is None:
        raise NotFound(not_found_message)
    return invoice


def resolve_test_mode(repo: InvoicingRepository, test_mode: Optional[bool]) -> bool:
    """Sin indicación explícita se usa el modo guardado en la configuración e-CF."""
    if test_mode is not None:
        return test_mode
    return (repo.get_ecf_config() or EcfConfig()).test_mode


def operation(name: str):
    """
    Convierte cualquier error inesperado del caso de uso en InternalError,
    conservando el mensaje original. Los errores tipados pasan intactos.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except InvoicingError as e:
                logger.warning(f"{name}: {e.code} - {e.message}")
                raise
            except Exception as e:
                logger.error(f"Error en {name}: {e}", exc_info=True)
                raise InternalError(str(e)) from e
        return wrapper
    return decorator
