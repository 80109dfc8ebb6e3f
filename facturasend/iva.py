"""
Cálculo de IVA para documentos FacturaSend

Reglas del validador SIFEN/FacturaSend (montos en guaraníes, sin decimales):
- Los precios incluyen IVA
- IVA general (10%): iva = ROUND(total / 11), ivaBase = total - iva
- Otros tipos (exonerado, exento): iva = 0
- ROUND redondea la mitad hacia +infinito (no es el redondeo bancario de Python)
"""
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_FLOOR
from typing import Optional, Tuple, Union

from .exceptions import DocumentoInvalidoError

Numero = Union[int, float, str, Decimal]

# Tipos de IVA (ivaTipo)
IVA_TIPO_GRAVADO = 1
IVA_TIPO_EXONERADO = 2
IVA_TIPO_EXENTO = 3
IVA_TIPO_GRAVADO_PARCIAL = 4

IVA_PROPORCION_TOTAL = 100

_MEDIO = Decimal("0.5")
_DIVISOR_IVA_10 = Decimal(11)


def a_decimal(valor: Numero) -> Decimal:
    """
    Convierte un valor numérico a Decimal finito.

    Los float se convierten vía str() para no arrastrar artefactos binarios
    (1.1 -> Decimal("1.1"), no 1.100000000000000088...).

    Raises:
        DocumentoInvalidoError: Si el valor no es numérico o no es finito
    """
    if isinstance(valor, bool):
        raise DocumentoInvalidoError(f"Valor numérico inválido: {valor!r}")
    try:
        if isinstance(valor, Decimal):
            resultado = valor
        elif isinstance(valor, float):
            resultado = Decimal(str(valor))
        else:
            resultado = Decimal(str(valor).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise DocumentoInvalidoError(f"Valor numérico inválido: {valor!r}")
    if not resultado.is_finite():
        raise DocumentoInvalidoError(f"Valor numérico no finito: {valor!r}")
    return resultado


def redondear(valor: Numero) -> int:
    """Redondea al entero más cercano; las mitades van hacia +infinito (2.5 -> 3, -2.5 -> -2)"""
    return int((a_decimal(valor) + _MEDIO).to_integral_value(rounding=ROUND_FLOOR))


def truncar(valor: Numero) -> int:
    """Descarta la parte fraccionaria hacia cero"""
    return int(a_decimal(valor).to_integral_value(rounding=ROUND_DOWN))


def calcular_iva(total: Numero, iva_tipo: int) -> int:
    """
    Calcula el IVA incluido en un total.

    total * 0.10 / 1.10 == total / 11, se calcula una sola vez en Decimal.

    Args:
        total: Total con IVA incluido (guaraníes)
        iva_tipo: Tipo de IVA del item (1 = gravado 10%)

    Returns:
        Monto de IVA (entero)
    """
    if iva_tipo != IVA_TIPO_GRAVADO:
        return 0
    return redondear(a_decimal(total) / _DIVISOR_IVA_10)


def desglosar(total: Numero, iva_tipo: int, iva: Optional[Numero] = None) -> Tuple[int, int]:
    """
    Separa un total en (ivaBase, iva).

    Si el item trae un iva explícito, se respeta (truncado) sin importar el ivaTipo.

    Returns:
        Tupla (iva_base, iva) con iva_base + iva == truncar(total)
    """
    total_entero = truncar(total)
    if iva is not None:
        monto_iva = truncar(iva)
    else:
        monto_iva = calcular_iva(total_entero, iva_tipo)
    return total_entero - monto_iva, monto_iva
