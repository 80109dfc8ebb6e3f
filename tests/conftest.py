"""
Pytest configuration y fixtures para tests FacturaSend
"""
import pytest

from facturasend.config import Emisor, FacturaSendConfig
from facturasend.models import Cliente, Documento, Item, Usuario

FACTURASEND_ENV_VARS = [
    "FACTURASEND_API_KEY",
    "FACTURASEND_BASE_URL",
    "FACTURASEND_TENANT",
    "FACTURASEND_TIMEOUT",
    "FACTURASEND_VALIDATE_PAYLOAD",
    "FACTURASEND_ESTABLECIMIENTO",
    "FACTURASEND_PUNTO",
    "FACTURASEND_USUARIO_DOCUMENTO_TIPO",
    "FACTURASEND_USUARIO_DOCUMENTO",
    "FACTURASEND_USUARIO_NOMBRE",
    "FACTURASEND_USUARIO_CARGO",
    "FACTURASEND_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_facturasend_env(monkeypatch):
    """Aísla cada test de las variables FACTURASEND_* del entorno (o de un .env local)"""
    for name in FACTURASEND_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def emisor():
    return Emisor(documento_numero="1234567", nombre="EMISOR DE PRUEBA")


@pytest.fixture
def config(emisor):
    """Configuración completa para tests (sin red)"""
    return FacturaSendConfig(
        api_key="test-key",
        base_url="https://api.facturasend.com.py/tenant_test",
        timeout=10,
        emisor=emisor,
    )


@pytest.fixture
def documento():
    """Documento mínimo con un item gravado sin IVA explícito"""
    return Documento(
        numero=15,
        fecha="2025-01-05T10:00:00",
        cliente=Cliente(razon_social="Cliente de Prueba SA", ruc="80012345-6"),
        usuario=Usuario(documento_numero="1234567", nombre="EMISOR DE PRUEBA"),
        items=[
            Item(descripcion="Servicio de consultoría", cantidad=1, precio_unitario=110000),
        ],
    )
