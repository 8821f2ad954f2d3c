"""
Benefícios API: Benefit Service
================================

What:  One method per API operation over the `beneficios` collection.
Why:   Keeps routes HTTP-only; every method can be tested with a mocked
       collection.
How:   Each method issues exactly one Motor call. Driver failures (including
       malformed identifiers) are logged and re-raised as DatabaseError with
       an operation-specific message; an empty delete raises NotFoundError.
Who:   Called by app.routes.beneficios.

Operation summary:
    list_beneficios   find().limit().skip().sort("order")   → [record]
    get_by_id         find({_id: id})                       → [record] or []
    search_by_name    find({$or: [{nome: /filtro/i}]})      → [record]
    delete_by_id      delete_one({_id: id})                 → DeleteResult | 404
    create            insert_one(body)                      → InsertResult
    update            update_one({_id: id}, {$set: body})   → UpdateResult

Design Decision:
    The service is stateless. The collection is passed in on every call, so
    the process-wide handle from app.database (or a test double) is the only
    shared state.
"""

import logging
import re
import unicodedata
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

from app.exceptions import DatabaseError, NotFoundError, error_item
from app.middleware.request_id import request_id_var
from app.models.beneficio import serialize_document, strip_identifier, to_object_id
from app.schemas.beneficio import DeleteResult, InsertResult, UpdateResult
from app.services.validation_service import validate_beneficio

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_SKIP = 0

# Sort key applied to every listing. The `order` query parameter is accepted
# but never consulted; records without this field keep natural order.
# TODO: sort by the requested `order` field once clients agree on its values.
LIST_SORT_FIELD = "order"

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")

# Base letter → every accented form accepted in its place
ACCENT_CLASSES = {
    "a": "aàáâãäå",
    "c": "cç",
    "e": "eèéêë",
    "i": "iìíîï",
    "n": "nñ",
    "o": "oòóôõö",
    "u": "uùúûü",
    "y": "yýÿ",
}


def parse_int(raw: Optional[str], default: int) -> int:
    """
    Lenient integer parsing for query strings.

    Reads a leading integer ("3abc" → 3). Absent, non-numeric and zero
    values give `default`.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    return int(match.group(1)) or default


def accent_insensitive_pattern(filtro: str) -> str:
    """
    Regex matching `filtro` literally, with accents ignored.

    Accents are stripped from the filter (NFD, combining marks dropped) and
    each foldable letter becomes a class of its accented forms:
    "ta bá" → "t[aàáâãäå]\\ b[aàáâãäå]". Case is left to the `i` option.
    """
    decomposed = unicodedata.normalize("NFD", filtro)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    parts = []
    for ch in base:
        variants = ACCENT_CLASSES.get(ch.lower())
        parts.append(f"[{variants}]" if variants else re.escape(ch))
    return "".join(parts)


class BeneficioService:
    """
    CRUD operations for benefit records.

    Error Handling Strategy:
        Every driver call sits inside try/except. Unknown failures become
        DatabaseError carrying one `{value, msg, param}` item, where `value`
        is the driver's message. Application errors raised on purpose
        (ValidationError, NotFoundError) are raised outside those blocks.
    """

    def _storage_error(self, exc: Exception, msg: str, param: str, **context: Any) -> DatabaseError:
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, msg, str(exc))
        context["error_type"] = type(exc).__name__
        return DatabaseError(
            message=msg,
            errors=[error_item(str(exc), msg, param)],
            context=context,
        )

    async def list_beneficios(
        self,
        collection: AsyncIOMotorCollection,
        limit: Optional[str] = None,
        skip: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Page through the collection.

        Args:
            limit: Page size as sent by the client (default 10)
            skip:  Records to skip as sent by the client (default 0)
            order: Accepted for compatibility; has no effect on ordering

        Raises:
            DatabaseError: the find failed
        """
        # negative limit means "single batch of |n|" to the driver
        page_size = abs(parse_int(limit, DEFAULT_LIMIT))
        offset = parse_int(skip, DEFAULT_SKIP)
        if offset < 0:
            offset = DEFAULT_SKIP
        if order is not None:
            logger.debug("Ignoring order=%r; listing is sorted by '%s'", order, LIST_SORT_FIELD)

        try:
            cursor = (
                collection.find()
                .limit(page_size)
                .skip(offset)
                .sort(LIST_SORT_FIELD, ASCENDING)
            )
            documents = await cursor.to_list(length=None)
        except Exception as e:
            raise self._storage_error(e, "Erro ao obter a listagem dos benefícios", "/")

        return [serialize_document(doc) for doc in documents]

    async def get_by_id(
        self, collection: AsyncIOMotorCollection, beneficio_id: str
    ) -> List[Dict[str, Any]]:
        """
        Fetch one record, wrapped in a list.

        Returns an empty list (not an error) when nothing matches.

        Raises:
            DatabaseError: malformed identifier or find failure
        """
        try:
            oid = to_object_id(beneficio_id)
            documents = await collection.find({"_id": {"$eq": oid}}).to_list(length=None)
        except Exception as e:
            raise self._storage_error(
                e, "Erro ao obter o benefício pelo ID", "/id/:id", beneficio_id=beneficio_id
            )

        return [serialize_document(doc) for doc in documents]

    async def search_by_name(
        self, collection: AsyncIOMotorCollection, filtro: str
    ) -> List[Dict[str, Any]]:
        """
        Case- and accent-insensitive substring match on `nome`.

        The filter is escaped, so "1.5" or "(kit)" match literally, and
        "ta bas" finds "Cesta Básica".

        Raises:
            DatabaseError: the find failed
        """
        pattern = accent_insensitive_pattern(str(filtro))
        query = {"$or": [{"nome": {"$regex": pattern, "$options": "i"}}]}
        try:
            documents = await collection.find(query).to_list(length=None)
        except Exception as e:
            raise self._storage_error(
                e, "Erro ao obter o benefícios pelo nome", "/nome/:filtro", filtro=filtro
            )

        return [serialize_document(doc) for doc in documents]

    async def delete_by_id(
        self, collection: AsyncIOMotorCollection, beneficio_id: str
    ) -> DeleteResult:
        """
        Remove one record.

        Raises:
            NotFoundError: no record has this identifier
            DatabaseError: malformed identifier or delete failure
        """
        try:
            oid = to_object_id(beneficio_id)
            result = await collection.delete_one({"_id": {"$eq": oid}})
        except Exception as e:
            raise self._storage_error(
                e, "Erro ao excluir o benefício", "/:id", beneficio_id=beneficio_id
            )

        if result.deleted_count == 0:
            raise NotFoundError(resource_id=beneficio_id)

        logger.info("Benefit %s deleted", beneficio_id)
        return DeleteResult(acknowledged=result.acknowledged, deleted_count=result.deleted_count)

    async def create(
        self, collection: AsyncIOMotorCollection, body: Dict[str, Any]
    ) -> InsertResult:
        """
        Validate and insert a new record.

        Any client-sent identifier is dropped; storage assigns `_id`.

        Raises:
            ValidationError: one or more rules failed
            DatabaseError: insert failed
        """
        _, fields = strip_identifier(body)
        document = validate_beneficio(fields)

        try:
            result = await collection.insert_one(document)
        except Exception as e:
            raise self._storage_error(e, "Erro ao incluir o benefício", "/")

        logger.info("Benefit %s created", result.inserted_id)
        return InsertResult(acknowledged=result.acknowledged, inserted_id=str(result.inserted_id))

    async def update(
        self, collection: AsyncIOMotorCollection, body: Dict[str, Any]
    ) -> UpdateResult:
        """
        Replace the given fields of an existing record.

        The identifier (`id`, or legacy `_id`) selects the record and is
        removed before validation, so it is never written as a field.

        Raises:
            ValidationError: one or more rules failed
            DatabaseError: missing/malformed identifier or update failure
        """
        beneficio_id, fields = strip_identifier(body)
        changes = validate_beneficio(fields)

        try:
            oid = to_object_id(beneficio_id)
            result = await collection.update_one({"_id": {"$eq": oid}}, {"$set": changes})
        except Exception as e:
            raise self._storage_error(
                e, "Erro ao alterar o benefício", "/", beneficio_id=str(beneficio_id)
            )

        logger.info(
            "Benefit %s updated (matched=%d, modified=%d)",
            beneficio_id,
            result.matched_count,
            result.modified_count,
        )
        return UpdateResult(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=str(result.upserted_id) if result.upserted_id is not None else None,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
beneficio_service = BeneficioService()
