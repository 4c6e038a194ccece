# app/domain/exceptions.py


class InvoicingError(Exception):
    """
    Error base de la aplicación. Cada subclase corresponde a uno de los
    códigos que la API devuelve al cliente.
    """
    code = "internal"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidArgument(InvoicingError):
    code = "invalid-argument"
    http_status = 400


class NotFound(InvoicingError):
    code = "not-found"
    http_status = 404


class FailedPrecondition(InvoicingError):
    code = "failed-precondition"
    http_status = 412


class Unauthenticated(InvoicingError):
    code = "unauthenticated"
    http_status = 401


class InternalError(InvoicingError):
    code = "internal"
    http_status = 500


class GatewayError(Exception):
    """Fallo de comunicación con el servicio web de la DGII."""
    pass


class SigningError(Exception):
    """Fallo al firmar o al descifrar el certificado."""
    pass
