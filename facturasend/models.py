"""
Modelos de datos del documento electrónico FacturaSend

Cada modelo expone to_dict() con las claves camelCase del payload de la API
y from_dict() para leer ese mismo formato.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import Emisor, Localidad
from .exceptions import DocumentoInvalidoError
from .iva import IVA_PROPORCION_TOTAL, a_decimal

Numero = Union[int, float, Decimal]


def numero_json(valor: Any) -> Union[int, float]:
    """Convierte un número a int (si es entero) o float para serializar a JSON"""
    d = a_decimal(valor)
    if d == d.to_integral_value():
        return int(d)
    return float(d)


def _requerido(data: Mapping[str, Any], key: str, modelo: str) -> Any:
    if key not in data:
        raise DocumentoInvalidoError(f"{modelo}: falta el campo requerido '{key}'")
    return data[key]


@dataclass
class Cliente:
    """Receptor del documento"""
    razon_social: str
    ruc: Optional[str] = None
    contribuyente: bool = True
    tipo_operacion: int = 1
    direccion: str = "Asuncion"
    numero_casa: str = "0"
    tipo_contribuyente: int = 2
    localidad: Localidad = field(default_factory=Localidad)

    def __post_init__(self):
        if not self.razon_social or not str(self.razon_social).strip():
            raise DocumentoInvalidoError("Cliente: razonSocial es requerida")
        if self.contribuyente and not self.ruc:
            raise DocumentoInvalidoError("Cliente: ruc es requerido para contribuyentes")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "contribuyente": self.contribuyente,
            "razonSocial": self.razon_social,
            "tipoOperacion": self.tipo_operacion,
            "direccion": self.direccion,
            "numeroCasa": self.numero_casa,
            "departamento": self.localidad.departamento,
            "departamentoDescripcion": self.localidad.departamento_descripcion,
            "distrito": self.localidad.distrito,
            "distritoDescripcion": self.localidad.distrito_descripcion,
            "ciudad": self.localidad.ciudad,
            "ciudadDescripcion": self.localidad.ciudad_descripcion,
            "pais": self.localidad.pais,
            "paisDescripcion": self.localidad.pais_descripcion,
            "tipoContribuyente": self.tipo_contribuyente,
        }
        if self.ruc is not None:
            data["ruc"] = self.ruc
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Cliente':
        defaults = Localidad()
        localidad = Localidad(
            departamento=data.get("departamento", defaults.departamento),
            departamento_descripcion=data.get("departamentoDescripcion", defaults.departamento_descripcion),
            distrito=data.get("distrito", defaults.distrito),
            distrito_descripcion=data.get("distritoDescripcion", defaults.distrito_descripcion),
            ciudad=data.get("ciudad", defaults.ciudad),
            ciudad_descripcion=data.get("ciudadDescripcion", defaults.ciudad_descripcion),
            pais=data.get("pais", defaults.pais),
            pais_descripcion=data.get("paisDescripcion", defaults.pais_descripcion),
        )
        return cls(
            razon_social=data.get("razonSocial", ""),
            ruc=data.get("ruc"),
            contribuyente=data.get("contribuyente", True),
            tipo_operacion=data.get("tipoOperacion", 1),
            direccion=data.get("direccion", "Asuncion"),
            numero_casa=data.get("numeroCasa", "0"),
            tipo_contribuyente=data.get("tipoContribuyente", 2),
            localidad=localidad,
        )


@dataclass
class Usuario:
    """Usuario emisor (bloque 'usuario')"""
    documento_numero: str
    nombre: str
    documento_tipo: int = 1
    cargo: str = "Propietario"

    def __post_init__(self):
        if not self.documento_numero:
            raise DocumentoInvalidoError("Usuario: documentoNumero es requerido")
        if not self.nombre:
            raise DocumentoInvalidoError("Usuario: nombre es requerido")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "documentoTipo": self.documento_tipo,
            "documentoNumero": self.documento_numero,
            "nombre": self.nombre,
            "cargo": self.cargo,
        }

    @classmethod
    def from_emisor(cls, emisor: Emisor) -> 'Usuario':
        return cls(
            documento_numero=emisor.documento_numero,
            nombre=emisor.nombre,
            documento_tipo=emisor.documento_tipo,
            cargo=emisor.cargo,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Usuario':
        return cls(
            documento_numero=data.get("documentoNumero", ""),
            nombre=data.get("nombre", ""),
            documento_tipo=data.get("documentoTipo", 1),
            cargo=data.get("cargo", "Propietario"),
        )


@dataclass
class Entrega:
    """Entrega/pago dentro de la condición de la operación"""
    tipo: int
    monto: Numero
    moneda: str = "PYG"

    def to_dict(self) -> Dict[str, Any]:
        return {"tipo": self.tipo, "monto": numero_json(self.monto), "moneda": self.moneda}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Entrega':
        return cls(
            tipo=_requerido(data, "tipo", "Entrega"),
            monto=_requerido(data, "monto", "Entrega"),
            moneda=data.get("moneda", "PYG"),
        )


@dataclass
class Condicion:
    """Condición de la operación (1 = contado)"""
    tipo: int = 1
    entregas: List[Entrega] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"tipo": self.tipo, "entregas": [e.to_dict() for e in self.entregas]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Condicion':
        return cls(
            tipo=data.get("tipo", 1),
            entregas=[Entrega.from_dict(e) for e in data.get("entregas", [])],
        )


@dataclass
class Factura:
    """Datos específicos de factura (presencia: 2 = operación electrónica)"""
    presencia: int = 2

    def to_dict(self) -> Dict[str, Any]:
        return {"presencia": self.presencia}


@dataclass
class Item:
    """Item del documento. precio_unitario incluye IVA."""
    descripcion: str
    cantidad: Numero
    precio_unitario: Numero
    unidad_medida: int = 77
    iva_tipo: int = 1
    iva_base: Optional[Numero] = None
    iva: Optional[Numero] = None
    iva_proporcion: int = IVA_PROPORCION_TOTAL
    codigo: Optional[str] = None

    def __post_init__(self):
        if not self.descripcion or not str(self.descripcion).strip():
            raise DocumentoInvalidoError("Item: descripcion es requerida")
        a_decimal(self.cantidad)
        a_decimal(self.precio_unitario)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "descripcion": self.descripcion,
            "cantidad": numero_json(self.cantidad),
            "unidadMedida": self.unidad_medida,
            "precioUnitario": numero_json(self.precio_unitario),
            "ivaTipo": self.iva_tipo,
        }
        if self.iva_base is not None:
            data["ivaBase"] = numero_json(self.iva_base)
        if self.iva is not None:
            data["iva"] = numero_json(self.iva)
        data["ivaProporcion"] = self.iva_proporcion
        if self.codigo:
            data["codigo"] = self.codigo
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Item':
        return cls(
            descripcion=data.get("descripcion", ""),
            cantidad=_requerido(data, "cantidad", "Item"),
            precio_unitario=_requerido(data, "precioUnitario", "Item"),
            unidad_medida=data.get("unidadMedida", 77),
            iva_tipo=data.get("ivaTipo", 1),
            iva_base=data.get("ivaBase"),
            iva=data.get("iva"),
            iva_proporcion=data.get("ivaProporcion", IVA_PROPORCION_TOTAL),
            codigo=data.get("codigo"),
        )


@dataclass
class Documento:
    """Documento electrónico tal como lo recibe /lote/create"""
    numero: int
    fecha: str
    cliente: Cliente
    usuario: Usuario
    items: List[Item]
    tipo_documento: int = 1
    establecimiento: int = 1
    punto: int = 1
    tipo_emision: int = 1
    tipo_transaccion: int = 2
    tipo_impuesto: int = 1
    moneda: str = "PYG"
    observacion: Optional[str] = None
    factura: Factura = field(default_factory=Factura)
    condicion: Condicion = field(default_factory=Condicion)

    def __post_init__(self):
        if not self.items:
            raise DocumentoInvalidoError("Documento: debe tener al menos un item")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "tipoDocumento": self.tipo_documento,
            "establecimiento": self.establecimiento,
            "punto": self.punto,
            "numero": self.numero,
            "fecha": self.fecha,
            "tipoEmision": self.tipo_emision,
            "tipoTransaccion": self.tipo_transaccion,
            "tipoImpuesto": self.tipo_impuesto,
            "moneda": self.moneda,
        }
        if self.observacion is not None:
            data["observacion"] = self.observacion
        data.update({
            "cliente": self.cliente.to_dict(),
            "usuario": self.usuario.to_dict(),
            "factura": self.factura.to_dict(),
            "condicion": self.condicion.to_dict(),
            "items": [item.to_dict() for item in self.items],
        })
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Documento':
        """Crea un documento desde el formato JSON de la API"""
        factura = data.get("factura") or {}
        return cls(
            numero=_requerido(data, "numero", "Documento"),
            fecha=_requerido(data, "fecha", "Documento"),
            cliente=Cliente.from_dict(_requerido(data, "cliente", "Documento")),
            usuario=Usuario.from_dict(_requerido(data, "usuario", "Documento")),
            items=[Item.from_dict(i) for i in data.get("items", [])],
            tipo_documento=data.get("tipoDocumento", 1),
            establecimiento=data.get("establecimiento", 1),
            punto=data.get("punto", 1),
            tipo_emision=data.get("tipoEmision", 1),
            tipo_transaccion=data.get("tipoTransaccion", 2),
            tipo_impuesto=data.get("tipoImpuesto", 1),
            moneda=data.get("moneda", "PYG"),
            observacion=data.get("observacion"),
            factura=Factura(presencia=factura.get("presencia", 2)),
            condicion=Condicion.from_dict(data.get("condicion") or {}),
        )
