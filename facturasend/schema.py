"""
Validación del lote FacturaSend contra el schema JSON incluido en el paquete
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator, ValidationError

SCHEMA_PATH = Path(__file__).parent / "schemas" / "lote.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    """Carga el schema del lote"""
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"No se encontró el schema {SCHEMA_PATH}")

    with open(SCHEMA_PATH, 'r', encoding='utf-8') as f:
        return json.load(f)


def format_validation_error(error: ValidationError) -> str:
    """Formatea un error de validación con formato simple (ruta: mensaje)"""
    path_parts = [str(p) for p in error.absolute_path]
    path_str = " -> ".join(path_parts) if path_parts else "raíz"
    return f"{path_str}: {error.message}"


def validar_lote(lote: List[Dict[str, Any]], schema: Optional[Dict[str, Any]] = None) -> List[str]:
    """
    Valida un lote (lista de documentos en formato API) contra el schema

    Args:
        lote: Lista de documentos
        schema: Schema JSON (si no se proporciona, se usa el del paquete)

    Returns:
        Lista de errores formateados (vacía si no hay errores)
    """
    if schema is None:
        schema = load_schema()

    validator = Draft202012Validator(schema)
    errors = list(validator.iter_errors(lote))

    if not errors:
        return []

    # Ordenar errores de manera estable
    errors.sort(key=lambda e: ("/".join(str(p) for p in e.absolute_path), e.message))

    return [format_validation_error(err) for err in errors]
