"""
Benefícios API: Benefit Document Helpers
=========================================

What:  How a benefit record looks in MongoDB and how it crosses the API boundary.
Why:   The collection is schemaless; the only structural rules are about the
       identifier, so they live here instead of in every service method.
How:   Plain functions over dicts. MongoDB keeps the identifier in `_id` as an
       ObjectId; the API exposes it as the string field `id`.

Document shape (collection `beneficios`):
    {
        "_id": ObjectId("665f1c2e9b1e8a3d4c5b6a79"),
        "nome": "Cesta Básica",
        "endereco": {"logradouro": "Rua A, 10", "bairro": "Centro", "cidade": "Votorantim"},
        "pontos": 10,
        "data": "2024-05-01",
        "quantidade": 3
    }

Identifier rules:
    - Never accepted from the client on create (`strip_identifier`)
    - On update, selects the target and is removed from the `$set` fields
"""

from typing import Any, Dict, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId

from app.exceptions import InvalidIdentifierError

# Keys a client may use to send the identifier; `_id` is the legacy spelling
IDENTIFIER_KEYS = ("id", "_id")


def to_object_id(raw_id: Any) -> ObjectId:
    """
    Build an ObjectId from client input.

    Raises:
        InvalidIdentifierError: raw_id is not a 24-char hex string (or 12 bytes)
    """
    if isinstance(raw_id, ObjectId):
        return raw_id
    # ObjectId(None) would mint a fresh id and silently match nothing
    if raw_id is None:
        raise InvalidIdentifierError(raw_id=raw_id, detail="The benefit id is required")
    try:
        return ObjectId(raw_id)
    except (InvalidId, TypeError) as e:
        raise InvalidIdentifierError(raw_id=raw_id, detail=str(e)) from e


def strip_identifier(body: Dict[str, Any]) -> Tuple[Optional[Any], Dict[str, Any]]:
    """
    Split a request body into (identifier, remaining fields).

    `id` wins over `_id` when both are present. The input dict is not modified.
    """
    fields = dict(body)
    identifier = None
    for key in reversed(IDENTIFIER_KEYS):
        if key in fields:
            identifier = fields.pop(key)
    return identifier, fields


def _stringify_ids(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _stringify_ids(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_ids(v) for v in value]
    return value


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a stored document to its JSON form (`_id` → string `id`)."""
    doc = _stringify_ids(document)
    if "_id" in doc:
        doc = {"id": doc.pop("_id"), **doc}
    return doc
