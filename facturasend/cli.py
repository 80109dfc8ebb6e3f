"""
CLI para construir, validar y enviar documentos a FacturaSend.

Uso:
    facturasend construir --cliente cliente.json --etapa etapa.json --tipo-cambio 7300 --numero 15
    facturasend validar documento.json
    facturasend enviar documento.json

Variables de entorno: ver facturasend.config.get_facturasend_config()
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

from .client import enviar_factura, preparar_lote
from .config import get_facturasend_config
from .documento import construir_documento
from .exceptions import FacturaSendError
from .models import Documento
from .respuesta import extraer_resultado
from .schema import validar_lote

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None) -> None:
    """Configura el logging de consola (nivel desde FACTURASEND_LOG_LEVEL, default INFO)"""
    level_name = (level or os.getenv("FACTURASEND_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _load_json(path: str) -> Any:
    with open(Path(path), 'r', encoding='utf-8') as f:
        return json.load(f)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_construir(args: argparse.Namespace) -> int:
    cliente = _load_json(args.cliente)
    etapa = _load_json(args.etapa)
    documento = construir_documento(
        company=None,
        client=cliente,
        stage=etapa,
        exchange_rate=args.tipo_cambio,
        numero=args.numero,
        config=get_facturasend_config(),
        fecha=args.fecha,
    )
    _print_json(documento.to_dict())
    return 0


def cmd_validar(args: argparse.Namespace) -> int:
    documento = Documento.from_dict(_load_json(args.documento))
    errores = validar_lote(preparar_lote(documento))
    if errores:
        print(f"❌ Documento inválido ({len(errores)} errores):")
        for error in errores:
            print(f"   - {error}")
        return 1
    print("✅ Documento válido")
    return 0


def cmd_enviar(args: argparse.Namespace) -> int:
    documento = _load_json(args.documento)
    response = enviar_factura(documento)
    if args.raw:
        _print_json(response)
    resultado = extraer_resultado(response)
    _print_json(resultado.to_dict())
    return 0 if resultado.aceptado else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="facturasend",
        description="Construye, valida y envía documentos electrónicos a FacturaSend (SIFEN)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Variables de entorno:
  FACTURASEND_API_KEY        - API key (requerida para enviar)
  FACTURASEND_BASE_URL       - URL base de la API (o FACTURASEND_TENANT)
  FACTURASEND_USUARIO_DOCUMENTO / FACTURASEND_USUARIO_NOMBRE - Emisor
        """
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Nivel de logging (default: FACTURASEND_LOG_LEVEL o INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    construir = subparsers.add_parser("construir", help="Construye el documento de una etapa facturable")
    construir.add_argument("--cliente", required=True, help="JSON con legal_name, address, document_number")
    construir.add_argument("--etapa", required=True, help="JSON con amount y stage_name")
    construir.add_argument("--tipo-cambio", required=True, help="Tipo de cambio a PYG")
    construir.add_argument("--numero", required=True, type=int, help="Número del documento")
    construir.add_argument("--fecha", default=None, help="Fecha de emisión YYYY-MM-DDTHH:MM:SS (default: ahora UTC)")
    construir.set_defaults(func=cmd_construir)

    validar = subparsers.add_parser("validar", help="Valida un documento JSON contra el schema del lote")
    validar.add_argument("documento", help="Documento en formato API (JSON)")
    validar.set_defaults(func=cmd_validar)

    enviar = subparsers.add_parser("enviar", help="Envía un documento JSON a FacturaSend")
    enviar.add_argument("documento", help="Documento en formato API (JSON)")
    enviar.add_argument("--raw", action="store_true", help="Imprimir también la respuesta cruda")
    enviar.set_defaults(func=cmd_enviar)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Error leyendo archivo: {e}", file=sys.stderr)
        return 2
    except FacturaSendError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
