"""
Excepciones del cliente FacturaSend
"""


class FacturaSendError(Exception):
    """Excepción base para errores del cliente FacturaSend"""
    pass


class FacturaSendConfigError(FacturaSendError):
    """Error de configuración FacturaSend"""
    pass


class FacturaSendClientError(FacturaSendError):
    """Error de transporte o de parsing en la comunicación con FacturaSend"""
    pass


class DocumentoInvalidoError(FacturaSendError, ValueError):
    """Documento o valor numérico inválido para armar el payload"""
    pass
