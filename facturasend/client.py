"""
Cliente HTTP para la API de lotes de FacturaSend
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from .config import FacturaSendConfig, get_facturasend_config
from .exceptions import FacturaSendClientError, FacturaSendConfigError
from .iva import IVA_PROPORCION_TOTAL, a_decimal, desglosar
from .models import Documento, Item, numero_json
from .schema import validar_lote

logger = logging.getLogger(__name__)

ERROR_API_KEY = "API Key no configurada"
ERROR_BASE_URL = "URL base no configurada"


def preparar_item(item: Item) -> Dict[str, Any]:
    """
    Arma el item del payload recalculando ivaBase/iva desde precio y cantidad.

    Un iva explícito en el item se respeta (truncado); ivaBase siempre se recalcula.
    """
    total = a_decimal(item.precio_unitario) * a_decimal(item.cantidad)
    iva_base, iva = desglosar(total, item.iva_tipo, item.iva)
    data = {
        "descripcion": item.descripcion,
        "cantidad": numero_json(item.cantidad),
        "unidadMedida": item.unidad_medida,
        "precioUnitario": numero_json(item.precio_unitario),
        "ivaTipo": item.iva_tipo,
        "ivaBase": iva_base,
        "iva": iva,
        "ivaProporcion": IVA_PROPORCION_TOTAL,
    }
    if item.codigo:
        data["codigo"] = item.codigo
    return data


def preparar_lote(documento: Documento) -> List[Dict[str, Any]]:
    """Envuelve el documento en un lote de un único elemento, con items recalculados"""
    payload = documento.to_dict()
    payload["items"] = [preparar_item(item) for item in documento.items]
    return [payload]


def serializar_lote(lote: List[Dict[str, Any]]) -> str:
    """
    Serializa el lote a JSON compacto (sin espacios), UTF-8 sin escapar.

    Raises:
        ValueError: Si el lote contiene NaN/Infinity
    """
    return json.dumps(lote, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


class FacturaSendClient:
    """
    Cliente HTTP para enviar lotes de documentos a FacturaSend

    Autenticación: header 'Authorization: Bearer api_key_{API_KEY}'
    """

    # Endpoints
    ENDPOINTS = {
        'lote': '/lote/create',
    }

    # La API genera XML y QR del DE al crear el lote
    LOTE_PARAMS = {'xml': 'true', 'qr': 'true'}

    def __init__(self, config: FacturaSendConfig):
        """
        Inicializa el cliente FacturaSend

        Args:
            config: Configuración con api_key y base_url

        Raises:
            FacturaSendConfigError: Si falta api_key o base_url
        """
        if not config.api_key:
            raise FacturaSendConfigError(ERROR_API_KEY)
        if not config.base_url:
            raise FacturaSendConfigError(ERROR_BASE_URL)

        self.config = config
        self.base_url = config.base_url.rstrip('/')
        self.timeout = config.timeout

        # Configurar cliente HTTP
        self.client = httpx.Client(timeout=self.timeout)

    def _build_url(self, endpoint_key: str) -> str:
        """Construye la URL completa del endpoint"""
        endpoint = self.ENDPOINTS.get(endpoint_key)
        if not endpoint:
            raise ValueError(f"Endpoint inválido: {endpoint_key}")
        return f"{self.base_url}{endpoint}"

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json; charset=utf-8',
            'Authorization': f'Bearer api_key_{self.config.api_key}',
        }

    def _make_request(
        self,
        method: str,
        url: str,
        content: Optional[bytes] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Realiza una petición HTTP y devuelve el cuerpo JSON tal cual.

        Las respuestas de error de FacturaSend también son JSON
        ({success: false, error: ...}), por eso no se filtra por status.

        Raises:
            FacturaSendClientError: Timeout, error de conexión o cuerpo no JSON
        """
        try:
            response = self.client.request(
                method, url, content=content, params=params, headers=self._headers()
            )
        except httpx.TimeoutException:
            raise FacturaSendClientError(f"Timeout: La petición excedió {self.timeout} segundos")
        except httpx.RequestError as e:
            raise FacturaSendClientError(f"Error de conexión: {str(e)}")

        logger.debug(f"FacturaSend {method} {url} -> HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError:
            raise FacturaSendClientError(
                f"Respuesta no es JSON válido (HTTP {response.status_code}): {response.text[:200]}"
            )

    def crear_lote(self, lote: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Envía un lote de documentos a /lote/create

        Args:
            lote: Lista de documentos en formato API

        Returns:
            Respuesta JSON de FacturaSend
        """
        json_body = serializar_lote(lote)
        logger.info(f"Payload lote FacturaSend: {json_body}")
        url = self._build_url('lote')
        return self._make_request('POST', url, content=json_body.encode('utf-8'), params=self.LOTE_PARAMS)

    def close(self):
        """Cierra el cliente HTTP"""
        self.client.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()


def enviar_factura(
    documento: Union[Documento, Mapping[str, Any]],
    config: Optional[FacturaSendConfig] = None,
    client: Optional[FacturaSendClient] = None,
) -> Dict[str, Any]:
    """
    Envía un documento a FacturaSend como lote de un elemento.

    Nunca lanza excepciones: cualquier error se devuelve como
    {"success": False, "error": mensaje}.

    Args:
        documento: Documento (o su dict en formato API)
        config: Configuración (si None, se lee del entorno en este momento)
        client: Cliente ya abierto (si None, se crea y se cierra aquí)

    Returns:
        Respuesta JSON de FacturaSend, o dict de error
    """
    try:
        if config is None:
            config = client.config if client is not None else get_facturasend_config()
    except FacturaSendConfigError as e:
        return {"success": False, "error": str(e)}

    if not config.api_key:
        return {"success": False, "error": ERROR_API_KEY}
    if not config.base_url:
        return {"success": False, "error": ERROR_BASE_URL}

    try:
        if not isinstance(documento, Documento):
            documento = Documento.from_dict(documento)

        lote = preparar_lote(documento)

        if config.validar_payload:
            errores = validar_lote(lote)
            if errores:
                return {"success": False, "error": "Payload inválido: " + "; ".join(errores)}

        if client is not None:
            return client.crear_lote(lote)

        with FacturaSendClient(config) as owned_client:
            return owned_client.crear_lote(lote)

    except Exception as e:
        return {"success": False, "error": str(e)}
