"""
Exception hierarchy for the Consulta API

Every error raised on purpose by the application extends ConsultaError.
The handlers registered in consulta.main turn them into the JSON envelope
{"error": ..., "message": ...} with the class' HTTP status code.

Empty results and multiple matches are NOT errors: repositories return
empty lists or the full candidate set instead of raising.
"""
from typing import Any, Dict, Optional


class ConsultaError(Exception):
    """Base exception for all Consulta errors"""
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    error: str = "Erro interno do servidor"

    def __init__(self, message: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        self.message = message or self.__class__.error
        self.extra = extra or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Response body for this error"""
        return {
            "error": self.error,
            "message": self.message,
            **self.extra
        }


class MissingParameterError(ConsultaError):
    """A required identifier was not supplied (400)"""
    status_code = 400
    code = "MISSING_PARAMETER"
    error = "Parâmetro obrigatório ausente"

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"O parâmetro '{parameter}' é obrigatório")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class InvalidFilterError(ConsultaError):
    """A filter value, table or column was rejected (400)"""
    status_code = 400
    code = "INVALID_FILTER"
    error = "Filtro inválido"

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(ConsultaError):
    """Configuration is missing or invalid"""
    code = "CONFIGURATION_ERROR"
    error = "Configuração inválida"


class StoreUnavailableError(ConsultaError):
    """Connection or query failure in the record store (500)"""
    code = "STORE_UNAVAILABLE"
    error = "Erro ao consultar o banco de dados"


class StoreTimeoutError(StoreUnavailableError):
    """The per-request deadline expired before the store answered"""
    code = "STORE_TIMEOUT"
    error = "Tempo limite da consulta excedido"
