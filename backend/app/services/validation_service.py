"""
Benefícios API: Benefit Validation Rules
=========================================

What:  The ordered rule set applied to create/update bodies.
Why:   A benefit must carry a usable name, a full address, numeric score and
       quantity, and an ISO-looking date before it reaches the collection.
How:   Each rule is an independent (field, predicate, message) triple. Every
       rule runs, and every failure is collected in rule order, so a client
       fixes all problems in one round trip.
Who:   Called by BeneficioService.create / update.

Value semantics:
    - Fields are addressed with dotted paths ("endereco.bairro")
    - A missing field reads as "" (so it fails presence rules)
    - Scalars are compared through their string form; booleans are not numbers
    - Floats are written out in positional notation, never with an exponent
    - `nome` is trimmed before its rules run, and stored trimmed
"""

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List

from app.exceptions import ValidationError, error_item

logger = logging.getLogger(__name__)

_MISSING = object()

NUMERIC_PATTERN = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

NOME_MIN_LENGTH = 5
NOME_MAX_LENGTH = 200


@dataclass(frozen=True)
class Rule:
    """One field check. `check` receives the field's string form."""

    field: str
    check: Callable[[str], bool]
    message: str


def _lookup(body: Dict[str, Any], path: str) -> Any:
    current: Any = body
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _as_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and math.isfinite(value):
        # no exponent: 1e16 reads "10000000000000000", 1e-05 reads "0.00001"
        return format(Decimal(repr(value)), "f")
    return str(value)


def _not_empty(text: str) -> bool:
    return len(text) > 0


def _is_numeric(text: str) -> bool:
    return bool(NUMERIC_PATTERN.fullmatch(text))


def _is_date(text: str) -> bool:
    # shape only; "9999-99-99" is accepted
    return bool(DATE_PATTERN.fullmatch(text))


BENEFICIO_RULES: List[Rule] = [
    Rule("nome", lambda t: _not_empty(t.strip()), "É obrigatório informar o nome do benefício"),
    Rule("nome", lambda t: len(t.strip()) >= NOME_MIN_LENGTH, "O nome é muito curto. Mínimo de 5"),
    Rule("nome", lambda t: len(t.strip()) <= NOME_MAX_LENGTH, "O nome é muito longo. Máximo de 200"),
    Rule("endereco.logradouro", _not_empty, "O Logradouro é obrigatório"),
    Rule("endereco.bairro", _not_empty, "O bairro é obrigatório"),
    Rule("endereco.cidade", _not_empty, "A localidade é obrigatório"),
    Rule("pontos", _is_numeric, "Os pontos devem ser um número"),
    Rule("data", _is_date, "O formato de data é inválido. Informe yyyy-mm-dd"),
    Rule("quantidade", _is_numeric, "A quantidade deve ser um número"),
]


def collect_violations(body: Dict[str, Any], rules: List[Rule] = BENEFICIO_RULES) -> List[Dict[str, Any]]:
    """
    Run every rule against `body` and return the failures in rule order.

    Returns:
        List of `{value, msg, param}` items; empty when the body is valid.
    """
    violations = []
    for rule in rules:
        raw = _lookup(body, rule.field)
        text = _as_text(raw)
        if not rule.check(text):
            value = "" if raw is _MISSING else raw
            if isinstance(value, str) and rule.field == "nome":
                value = value.strip()
            violations.append(error_item(value, rule.message, rule.field))
    return violations


def sanitize(body: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of `body` with `nome` trimmed (other fields untouched)."""
    clean = dict(body)
    if isinstance(clean.get("nome"), str):
        clean["nome"] = clean["nome"].strip()
    return clean


def validate_beneficio(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and sanitize a benefit body.

    Returns:
        The sanitized body, ready to be written.

    Raises:
        ValidationError: at least one rule failed (all failures attached)
    """
    violations = collect_violations(body)
    if violations:
        logger.info(
            "Benefit rejected: %d rule(s) failed (%s)",
            len(violations),
            ", ".join(v["param"] for v in violations),
        )
        raise ValidationError(errors=violations)
    return sanitize(body)
