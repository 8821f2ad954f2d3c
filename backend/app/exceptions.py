"""
Benefícios API: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for each failure kind the API reports.
Why:   Services raise these instead of building error dicts; global handlers
       registered in main.py turn them into one response envelope.
How:   Each exception carries a message, an optional context dict (logged,
       never returned) and a list of `{value, msg, param}` error items
       (returned to the client).
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    BeneficiosError (base)
    ├── ValidationError              → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error
        └── InvalidIdentifierError   → 500 (malformed ObjectId)

Response envelope (same shape for every error):
    {
        "error": "validation_error",
        "message": "Dados do benefício inválidos",
        "errors": [{"value": "", "msg": "O bairro é obrigatório", "param": "endereco.bairro"}],
        "request_id": "a1b2c3d4"
    }
"""

from typing import Any, Dict, List, Optional


def error_item(value: Any, msg: str, param: str) -> Dict[str, Any]:
    """Builds one `{value, msg, param}` entry of the `errors` list."""
    return {"value": value, "msg": msg, "param": param}


class BeneficiosError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        errors:   Per-item failure details returned to the client
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BeneficiosError):
    """
    Raised when a request body breaks one or more validation rules.

    HTTP: 400 Bad Request. `errors` lists every violated rule in rule order.
    """

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        message: str = "Dados do benefício inválidos",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, errors=errors, context=context)


class NotFoundError(BeneficiosError):
    """
    Raised when a targeted mutation affected no record.

    HTTP: 404 Not Found. Lookups (get-by-id, search) never raise this:
    they answer 200 with an empty array.
    """

    status_code = 404
    code = "not_found"

    def __init__(
        self,
        resource_id: str,
        msg: str = "Erro ao excluir o benefício",
        param: str = "/:id",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource_id"] = resource_id
        super().__init__(
            message=msg,
            errors=[error_item(f"Não há nenhum benefício com o id {resource_id}", msg, param)],
            context=ctx,
        )
        self.resource_id = resource_id


class DatabaseError(BeneficiosError):
    """
    Raised when a driver call fails.

    HTTP: 500 Internal Server Error. The driver's own message goes in the
    `value` of the single error item so callers can tell failures apart.
    """

    status_code = 500
    code = "database_error"

    def __init__(
        self,
        message: str = "Erro ao acessar o banco de dados",
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, errors=errors, context=context)


class InvalidIdentifierError(DatabaseError):
    """
    Raised when a path or body identifier is not a valid ObjectId.

    Reported as 500 like any other storage-layer failure: building the
    identifier is part of the driver call.
    """

    def __init__(
        self,
        raw_id: Any,
        detail: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["raw_id"] = str(raw_id)
        super().__init__(message=detail, context=ctx)
        self.raw_id = raw_id
        self.detail = detail
