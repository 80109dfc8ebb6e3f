"""
Interpretación de la respuesta de /lote/create de FacturaSend.

Estados resultantes:
- ACEPTADO: el DE fue generado (estado '0-Generado' o trae CDC)
- RECHAZADO: error de la API, lote vacío, o DE no generado
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

ESTADO_ACEPTADO = "aceptado"
ESTADO_RECHAZADO = "rechazado"

# Estado que devuelve FacturaSend en deList[].estado para un DE generado
DE_ESTADO_GENERADO = "0-Generado"

MENSAJE_ERROR_DEFAULT = "Error"
MENSAJE_PROCESADO_DEFAULT = "Procesado"


@dataclass(frozen=True)
class ResultadoEnvio:
    """Resultado simplificado del envío de un documento"""
    estado: str
    mensaje: str
    cdc: Optional[str] = None
    qr: Optional[str] = None
    lote_id: Optional[Any] = None

    @property
    def aceptado(self) -> bool:
        return self.estado == ESTADO_ACEPTADO

    def to_dict(self) -> Dict[str, Any]:
        """Dict con estado y mensaje; cdc, qr y loteId solo si están presentes"""
        data = {"estado": self.estado, "mensaje": self.mensaje}
        if self.cdc is not None:
            data["cdc"] = self.cdc
        if self.qr is not None:
            data["qr"] = self.qr
        if self.lote_id is not None:
            data["loteId"] = self.lote_id
        return data


def _primer_de(response: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    result = response.get("result")
    if not isinstance(result, Mapping):
        return None
    de_list = result.get("deList")
    if not de_list or not isinstance(de_list, list):
        return None
    de = de_list[0]
    if not de or not isinstance(de, Mapping):
        return None
    return de


def extraer_resultado(response: Any) -> ResultadoEnvio:
    """
    Convierte la respuesta de FacturaSend en aceptado/rechazado.

    Args:
        response: Respuesta JSON de /lote/create (o el dict de error de enviar_factura)

    Returns:
        ResultadoEnvio
    """
    if not isinstance(response, Mapping):
        return ResultadoEnvio(estado=ESTADO_RECHAZADO, mensaje=MENSAJE_ERROR_DEFAULT)

    de = _primer_de(response)
    if not response.get("success") or de is None:
        return ResultadoEnvio(
            estado=ESTADO_RECHAZADO,
            mensaje=response.get("error") or response.get("mensaje") or MENSAJE_ERROR_DEFAULT,
        )

    cdc = de.get("cdc")
    generado = de.get("estado") == DE_ESTADO_GENERADO or bool(cdc)

    return ResultadoEnvio(
        estado=ESTADO_ACEPTADO if generado else ESTADO_RECHAZADO,
        mensaje=de.get("respuesta_mensaje") or MENSAJE_PROCESADO_DEFAULT,
        cdc=cdc,
        qr=de.get("qr"),
        lote_id=response["result"].get("loteId"),
    )
