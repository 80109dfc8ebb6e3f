"""
Tests para la construcción del documento desde una etapa facturable
"""
import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from facturasend.config import FacturaSendConfig, Localidad
from facturasend.documento import construir_documento, fecha_emision, formatear_tipo_cambio
from facturasend.exceptions import DocumentoInvalidoError
from facturasend.iva import redondear


@pytest.fixture
def client_record():
    return {
        "legal_name": "Constructora del Este SA",
        "address": "Av. Mariscal López 1234",
        "document_number": "80012345-6",
    }


@pytest.fixture
def stage_record():
    return {"amount": "100000.00", "stage_name": "Etapa 1 - Anteproyecto"}


class TestConstruirDocumento:
    """Tests para construir_documento()"""

    def test_scenario_100000(self, config, client_record, stage_record):
        """100000.00 x 1 -> montoTotal 100000, iva 9091, ivaBase 90909"""
        doc = construir_documento(None, client_record, stage_record, 1, 15, config=config)
        data = doc.to_dict()

        item = data["items"][0]
        assert item["precioUnitario"] == 100000
        assert item["iva"] == 9091
        assert item["ivaBase"] == 90909
        assert data["condicion"]["entregas"] == [{"tipo": 9, "monto": 100000, "moneda": "PYG"}]

    @pytest.mark.parametrize("amount,rate", [
        ("100000.00", 1),
        ("1234.56", 7312.5),
        ("0.01", 7300),
        ("99.995", 1),
        (2500, "6950.25"),
    ])
    def test_iva_base_plus_iva_equals_total(self, config, client_record, amount, rate):
        stage = {"amount": amount, "stage_name": "Etapa"}
        doc = construir_documento(None, client_record, stage, rate, 1, config=config)
        item = doc.items[0]
        assert item.iva_base + item.iva == redondear(Decimal(str(amount)) * Decimal(str(rate)))
        assert item.precio_unitario == item.iva_base + item.iva

    def test_header_fields(self, config, client_record, stage_record):
        doc = construir_documento(
            None, client_record, stage_record, 7300, 42, config=config, fecha="2025-01-05T10:00:00"
        )
        data = doc.to_dict()

        assert data["tipoDocumento"] == 1
        assert data["establecimiento"] == 1
        assert data["punto"] == 1
        assert data["numero"] == 42
        assert data["fecha"] == "2025-01-05T10:00:00"
        assert data["tipoEmision"] == 1
        assert data["tipoTransaccion"] == 2
        assert data["tipoImpuesto"] == 1
        assert data["moneda"] == "PYG"
        assert data["observacion"] == "TC: 7300"
        assert data["factura"] == {"presencia": 2}
        assert data["condicion"]["tipo"] == 1

    def test_key_order_matches_api(self, config, client_record, stage_record):
        data = construir_documento(None, client_record, stage_record, 1, 1, config=config).to_dict()
        assert list(data.keys()) == [
            "tipoDocumento", "establecimiento", "punto", "numero", "fecha",
            "tipoEmision", "tipoTransaccion", "tipoImpuesto", "moneda", "observacion",
            "cliente", "usuario", "factura", "condicion", "items",
        ]

    def test_cliente_block(self, config, client_record, stage_record):
        cliente = construir_documento(None, client_record, stage_record, 1, 1, config=config).to_dict()["cliente"]

        assert cliente["contribuyente"] is True
        assert cliente["razonSocial"] == "Constructora del Este SA"
        assert cliente["direccion"] == "Av. Mariscal López 1234"
        assert cliente["numeroCasa"] == "0"
        assert cliente["tipoOperacion"] == 1
        assert cliente["tipoContribuyente"] == 2
        assert cliente["ruc"] == "80012345-6"
        assert cliente["pais"] == "PRY"
        assert cliente["paisDescripcion"] == "Paraguay"
        assert cliente["departamentoDescripcion"] == "CAPITAL"
        assert cliente["ciudadDescripcion"] == "ASUNCION"

    def test_cliente_defaults(self, config, stage_record):
        cliente = construir_documento(
            None, {"document_number": "4554737-8"}, stage_record, 1, 1, config=config
        ).to_dict()["cliente"]
        assert cliente["razonSocial"] == "Cliente"
        assert cliente["direccion"] == "Asuncion"

    def test_usuario_from_config(self, config, client_record, stage_record):
        usuario = construir_documento(None, client_record, stage_record, 1, 1, config=config).to_dict()["usuario"]
        assert usuario == {
            "documentoTipo": 1,
            "documentoNumero": "1234567",
            "nombre": "EMISOR DE PRUEBA",
            "cargo": "Propietario",
        }

    def test_localidad_and_numeracion_from_config(self, emisor, client_record, stage_record):
        config = FacturaSendConfig(
            establecimiento=2,
            punto=3,
            emisor=emisor,
            localidad=Localidad(
                departamento=11,
                departamento_descripcion="CENTRAL",
                distrito=145,
                distrito_descripcion="SAN LORENZO",
                ciudad=6106,
                ciudad_descripcion="SAN LORENZO",
            ),
        )
        data = construir_documento(None, client_record, stage_record, 1, 1, config=config).to_dict()
        assert data["establecimiento"] == 2
        assert data["punto"] == 3
        assert data["cliente"]["departamento"] == 11
        assert data["cliente"]["ciudadDescripcion"] == "SAN LORENZO"

    def test_item(self, config, client_record, stage_record):
        item = construir_documento(None, client_record, stage_record, 1, 1, config=config).to_dict()["items"][0]
        assert item == {
            "descripcion": "Etapa 1 - Anteproyecto",
            "cantidad": 1,
            "unidadMedida": 77,
            "precioUnitario": 100000,
            "ivaTipo": 1,
            "ivaBase": 90909,
            "iva": 9091,
            "ivaProporcion": 100,
        }

    def test_config_from_env_when_not_given(self, monkeypatch, client_record, stage_record):
        monkeypatch.setenv("FACTURASEND_USUARIO_DOCUMENTO", "7654321")
        monkeypatch.setenv("FACTURASEND_USUARIO_NOMBRE", "EMISOR ENV")
        monkeypatch.setenv("FACTURASEND_PUNTO", "5")
        doc = construir_documento(None, client_record, stage_record, 1, 1)
        assert doc.usuario.documento_numero == "7654321"
        assert doc.punto == 5

    @pytest.mark.parametrize("amount", ["NaN", "abc", None, float("inf")])
    def test_invalid_amount(self, config, client_record, amount):
        with pytest.raises(DocumentoInvalidoError):
            construir_documento(None, client_record, {"amount": amount, "stage_name": "X"}, 1, 1, config=config)

    def test_invalid_exchange_rate(self, config, client_record, stage_record):
        with pytest.raises(DocumentoInvalidoError):
            construir_documento(None, client_record, stage_record, float("nan"), 1, config=config)

    def test_missing_stage_name(self, config, client_record):
        with pytest.raises(DocumentoInvalidoError, match="descripcion"):
            construir_documento(None, client_record, {"amount": "10"}, 1, 1, config=config)

    def test_missing_emisor(self, client_record, stage_record):
        with pytest.raises(DocumentoInvalidoError, match="documentoNumero"):
            construir_documento(None, client_record, stage_record, 1, 1, config=FacturaSendConfig())

    def test_json_round_trip(self, config, client_record, stage_record):
        data = construir_documento(None, client_record, stage_record, 7300, 1, config=config).to_dict()
        assert json.loads(json.dumps(data)) == data


class TestHelpers:

    def test_fecha_emision_utc_without_millis(self):
        momento = datetime(2025, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
        assert fecha_emision(momento) == "2025-03-01T12:30:45"

    def test_fecha_emision_converts_to_utc(self):
        asuncion = timezone(timedelta(hours=-3))
        momento = datetime(2025, 3, 1, 21, 0, 0, tzinfo=asuncion)
        assert fecha_emision(momento) == "2025-03-02T00:00:00"

    def test_formatear_tipo_cambio(self):
        assert formatear_tipo_cambio(1) == "1"
        assert formatear_tipo_cambio(1.0) == "1"
        assert formatear_tipo_cambio("7300.50") == "7300.5"
        assert formatear_tipo_cambio(7312.25) == "7312.25"
