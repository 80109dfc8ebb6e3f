"""
Configuración para cliente FacturaSend

Centraliza la lectura de variables de entorno. Los componentes reciben un
FacturaSendConfig ya construido; solo get_facturasend_config() lee el entorno.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .exceptions import FacturaSendConfigError

load_dotenv()

FACTURASEND_API_HOST = "https://api.facturasend.com.py"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Localidad:
    """Datos de localidad del receptor (código + descripción según catálogo SIFEN)"""
    departamento: int = 1
    departamento_descripcion: str = "CAPITAL"
    distrito: int = 1
    distrito_descripcion: str = "ASUNCION"
    ciudad: int = 1
    ciudad_descripcion: str = "ASUNCION"
    pais: str = "PRY"
    pais_descripcion: str = "Paraguay"


@dataclass(frozen=True)
class Emisor:
    """Identidad del usuario que emite los documentos (bloque 'usuario' del payload)"""
    documento_numero: str = ""
    nombre: str = ""
    documento_tipo: int = 1
    cargo: str = "Propietario"


@dataclass(frozen=True)
class FacturaSendConfig:
    """Configuración del cliente FacturaSend"""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    validar_payload: bool = False
    establecimiento: int = 1
    punto: int = 1
    emisor: Emisor = field(default_factory=Emisor)
    localidad: Localidad = field(default_factory=Localidad)

    @property
    def lote_url(self) -> str:
        """URL del endpoint de creación de lotes"""
        return f"{(self.base_url or '').rstrip('/')}/lote/create"


def base_url_for_tenant(tenant: str) -> str:
    """Construye la URL base de la API para un tenant FacturaSend"""
    tenant = tenant.strip().strip("/")
    if not tenant:
        raise FacturaSendConfigError("El tenant de FacturaSend no puede estar vacío")
    return f"{FACTURASEND_API_HOST}/{tenant}"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise FacturaSendConfigError(f"{name} inválido: '{raw}'. Debe ser un número entero")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        raise FacturaSendConfigError(f"{name} inválido: '{raw}'. Debe ser un número")
    if value <= 0:
        raise FacturaSendConfigError(f"{name} debe ser mayor a 0 (recibido: {raw})")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "si", "sí")


def get_facturasend_config() -> FacturaSendConfig:
    """
    Obtiene la configuración FacturaSend desde variables de entorno

    Variables:
        FACTURASEND_API_KEY: API key (sin el prefijo 'api_key_')
        FACTURASEND_BASE_URL: URL base completa de la API
        FACTURASEND_TENANT: Tenant, si no se define FACTURASEND_BASE_URL
        FACTURASEND_TIMEOUT: Timeout HTTP en segundos (default: 30)
        FACTURASEND_VALIDATE_PAYLOAD: Validar el lote contra el schema antes de enviar
        FACTURASEND_ESTABLECIMIENTO / FACTURASEND_PUNTO: Numeración (default: 1)
        FACTURASEND_USUARIO_*: Identidad del emisor

    Returns:
        Configuración FacturaSend

    Raises:
        FacturaSendConfigError: Si algún valor tiene formato inválido
    """
    base_url = os.getenv("FACTURASEND_BASE_URL")
    if not base_url:
        tenant = os.getenv("FACTURASEND_TENANT")
        base_url = base_url_for_tenant(tenant) if tenant else None

    emisor = Emisor(
        documento_numero=os.getenv("FACTURASEND_USUARIO_DOCUMENTO", ""),
        nombre=os.getenv("FACTURASEND_USUARIO_NOMBRE", ""),
        documento_tipo=_env_int("FACTURASEND_USUARIO_DOCUMENTO_TIPO", 1),
        cargo=os.getenv("FACTURASEND_USUARIO_CARGO", "Propietario"),
    )

    return FacturaSendConfig(
        api_key=os.getenv("FACTURASEND_API_KEY") or None,
        base_url=base_url,
        timeout=_env_float("FACTURASEND_TIMEOUT", DEFAULT_TIMEOUT),
        validar_payload=_env_bool("FACTURASEND_VALIDATE_PAYLOAD"),
        establecimiento=_env_int("FACTURASEND_ESTABLECIMIENTO", 1),
        punto=_env_int("FACTURASEND_PUNTO", 1),
        emisor=emisor,
    )
