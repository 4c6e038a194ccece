# app/infrastructure/external/dgii_adapter.py
import logging
import time
import requests
from typing import Optional, Dict, Any

from app.domain.exceptions import GatewayError
from app.domain.ports.dgii_gateway import (
    DGIIGateway, SubmissionResult, StatusResult, ServiceStatus,
    SERVICE_ONLINE, SERVICE_OFFLINE, SERVICE_DEGRADED,
)

logger = logging.getLogger(__name__)

ENV_TEST = "testecf"
ENV_PRODUCTION = "ecf"


def environment_for(test_mode: bool) -> str:
    return ENV_TEST if test_mode else ENV_PRODUCTION


class DGIIRestAdapter(DGIIGateway):
    """
    Adaptador para los servicios web de e-CF de la DGII. Obtiene un token
    con las credenciales configuradas y lo reutiliza mientras no expire.
    """
    TOKEN_TTL_SECONDS = 3600

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        rnc: Optional[str] = None,
        environment: str = ENV_PRODUCTION,
        timeout: float = 30,
        probe_timeout: float = 5,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self.rnc = rnc
        self.environment = environment
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self.http = session or requests.Session()
        self._token: Optional[str] = None
        self._token_obtained_at = 0.0

    def _url(self, path: str, environment: Optional[str] = None) -> str:
        return f"{self.base_url}/{environment or self.environment}/{path.lstrip('/')}"

    def _get_access_token(self) -> str:
        if self._token and time.monotonic() - self._token_obtained_at < self.TOKEN_TTL_SECONDS:
            return self._token

        url = self._url("autenticacion/api/Autenticacion")
        payload = {"usuario": self.username, "clave": self.password, "rnc": self.rnc}
        logger.info("Obteniendo token de la DGII...")
        try:
            response = self.http.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            token = response.json().get("token")
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Error al autenticar con la DGII: {e}") from e
        except ValueError as e:
            raise GatewayError(f"Respuesta inválida de autenticación DGII: {e}") from e

        if not token:
            raise GatewayError("La respuesta de autenticación de la DGII no contiene 'token'.")
        self._token = token
        self._token_obtained_at = time.monotonic()
        return token

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._get_access_token()}", "Accept": "application/json"}

    def _json(self, response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise GatewayError(f"Respuesta inválida de la DGII (no era JSON): {response.text[:200]}") from e
        if not isinstance(data, dict):
            raise GatewayError(f"Respuesta inesperada de la DGII: {data!r}")
        return data

    def submit(self, signed_xml: str, filename: str) -> SubmissionResult:
        url = self._url("recepcion/api/FacturasElectronicas")
        files = {"xml": (filename, signed_xml.encode("utf-8"), "application/xml")}
        logger.info(f"Enviando {filename} a la DGII ({self.environment})...")
        try:
            response = self.http.post(url, files=files, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Error al enviar el e-CF a la DGII: {e}") from e

        data = self._json(response)
        track_id = data.get("trackId")
        if not track_id:
            raise GatewayError("La respuesta de la DGII no contiene 'trackId'.")
        logger.info(f"e-CF {filename} recibido por la DGII. trackId={track_id}")
        return SubmissionResult(track_id=track_id, message=data.get("mensaje"), raw=data)

    def check_status(self, track_id: str) -> StatusResult:
        url = self._url("consultaresultado/api/Consultas/Estado")
        try:
            response = self.http.get(url, params={"trackid": track_id}, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Error al consultar el estado en la DGII: {e}") from e

        data = self._json(response)
        mensajes = data.get("mensajes") or []
        message = "; ".join(m.get("valor", "") for m in mensajes if isinstance(m, dict)) or data.get("mensaje")
        return StatusResult(status=data.get("estado") or "En Proceso", message=message, raw=data)

    def cancel(self, signed_xml: str) -> SubmissionResult:
        url = self._url("emisorreceptor-ws/AnulacionDocumentos")
        headers = self._headers()
        headers["Content-Type"] = "application/xml"
        try:
            response = self.http.post(url, data=signed_xml.encode("utf-8"), headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Error al enviar anulación a DGII: {e}") from e

        data = self._json(response)
        track_id = data.get("trackId") or f"AN-{int(time.time() * 1000)}"
        return SubmissionResult(track_id=track_id, message=data.get("mensaje"), raw=data)

    def probe(self, test_mode: bool) -> ServiceStatus:
        url = self._url("emisorreceptor-ws/EstatusDocumentosSolicitudes/status", environment_for(test_mode))
        try:
            response = self.http.get(url, timeout=self.probe_timeout)
        except requests.exceptions.Timeout:
            return ServiceStatus(status=SERVICE_DEGRADED, test_mode=test_mode,
                                 message="Tiempo de espera agotado al conectar con DGII")
        except requests.exceptions.RequestException as e:
            logger.error(f"Error al verificar estado de DGII: {e}")
            return ServiceStatus(status=SERVICE_OFFLINE, test_mode=test_mode,
                                 message=str(e) or "Error al conectar con DGII")

        if 200 <= response.status_code < 300:
            return ServiceStatus(status=SERVICE_ONLINE, test_mode=test_mode,
                                 message="Servicios DGII funcionando correctamente")
        if response.status_code >= 500:
            return ServiceStatus(status=SERVICE_OFFLINE, test_mode=test_mode,
                                 message=f"Error en el servidor DGII: {response.status_code}")
        return ServiceStatus(status=SERVICE_DEGRADED, test_mode=test_mode,
                             message=f"Respuesta inesperada: {response.status_code}")
