"""
Construcción del documento FacturaSend a partir de una etapa facturable
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .config import FacturaSendConfig, get_facturasend_config
from .iva import IVA_TIPO_GRAVADO, a_decimal, calcular_iva, redondear
from .models import (
    Cliente,
    Condicion,
    Documento,
    Entrega,
    Factura,
    Item,
    Usuario,
)

logger = logging.getLogger(__name__)

MONEDA_PYG = "PYG"
UNIDAD_MEDIDA_UNIDAD = 77
ENTREGA_TIPO_OTRO = 9
CONDICION_CONTADO = 1
PRESENCIA_ELECTRONICA = 2


def fecha_emision(momento: Optional[datetime] = None) -> str:
    """Fecha de emisión en UTC con formato YYYY-MM-DDTHH:MM:SS (sin milisegundos)"""
    momento = momento or datetime.now(timezone.utc)
    if momento.tzinfo is not None:
        momento = momento.astimezone(timezone.utc)
    return momento.strftime("%Y-%m-%dT%H:%M:%S")


def formatear_tipo_cambio(tipo_cambio: Any) -> str:
    """Formatea el tipo de cambio sin ceros decimales sobrantes (1.0 -> '1', 7300.50 -> '7300.5')"""
    d = a_decimal(tipo_cambio)
    if d == d.to_integral_value():
        return str(int(d))
    return format(d.normalize(), "f")


def construir_documento(
    company: Any,
    client: Mapping[str, Any],
    stage: Mapping[str, Any],
    exchange_rate: Any,
    numero: int,
    config: Optional[FacturaSendConfig] = None,
    fecha: Optional[str] = None,
) -> Documento:
    """
    Construye el documento electrónico para una etapa facturable.

    El monto de la etapa se convierte a guaraníes con el tipo de cambio y se
    factura como un único item gravado al 10% (IVA incluido).

    Args:
        company: Registro de la empresa (reservado, no se usa)
        client: Registro del cliente (legal_name, address, document_number)
        stage: Etapa facturable (amount, stage_name)
        exchange_rate: Tipo de cambio a PYG
        numero: Número secuencial del documento
        config: Configuración (si None, se lee del entorno)
        fecha: Fecha de emisión (si None, ahora en UTC)

    Returns:
        Documento listo para enviar

    Raises:
        DocumentoInvalidoError: Si el monto o el tipo de cambio no son números finitos,
            o si faltan datos requeridos del cliente/emisor
    """
    if config is None:
        config = get_facturasend_config()

    monto_total = redondear(a_decimal(stage.get("amount")) * a_decimal(exchange_rate))
    iva = calcular_iva(monto_total, IVA_TIPO_GRAVADO)
    iva_base = monto_total - iva

    logger.debug(
        f"Documento {numero}: montoTotal={monto_total} ivaBase={iva_base} iva={iva}"
    )

    cliente = Cliente(
        razon_social=client.get("legal_name") or "Cliente",
        ruc=client.get("document_number"),
        direccion=client.get("address") or "Asuncion",
        localidad=config.localidad,
    )

    return Documento(
        numero=numero,
        fecha=fecha or fecha_emision(),
        establecimiento=config.establecimiento,
        punto=config.punto,
        moneda=MONEDA_PYG,
        observacion=f"TC: {formatear_tipo_cambio(exchange_rate)}",
        cliente=cliente,
        usuario=Usuario.from_emisor(config.emisor),
        factura=Factura(presencia=PRESENCIA_ELECTRONICA),
        condicion=Condicion(
            tipo=CONDICION_CONTADO,
            entregas=[Entrega(tipo=ENTREGA_TIPO_OTRO, monto=monto_total, moneda=MONEDA_PYG)],
        ),
        items=[
            Item(
                descripcion=stage.get("stage_name"),
                cantidad=1,
                unidad_medida=UNIDAD_MEDIDA_UNIDAD,
                precio_unitario=monto_total,
                iva_tipo=IVA_TIPO_GRAVADO,
                iva_base=iva_base,
                iva=iva,
            )
        ],
    )
