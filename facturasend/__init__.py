"""
Cliente para la API de FacturaSend (facturación electrónica SIFEN)
Paraguay - DNIT
"""
from .config import Emisor, FacturaSendConfig, Localidad, get_facturasend_config
from .client import FacturaSendClient, enviar_factura
from .documento import construir_documento
from .exceptions import (
    DocumentoInvalidoError,
    FacturaSendClientError,
    FacturaSendConfigError,
    FacturaSendError,
)
from .respuesta import ResultadoEnvio, extraer_resultado

__all__ = [
    'Emisor',
    'FacturaSendConfig',
    'Localidad',
    'get_facturasend_config',
    'FacturaSendClient',
    'enviar_factura',
    'construir_documento',
    'DocumentoInvalidoError',
    'FacturaSendClientError',
    'FacturaSendConfigError',
    'FacturaSendError',
    'ResultadoEnvio',
    'extraer_resultado',
]
