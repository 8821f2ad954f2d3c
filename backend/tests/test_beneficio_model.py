"""
Benefícios API: Document Helper Tests
======================================

Identifier parsing, identifier stripping and JSON conversion of stored documents.
"""

import pytest
from bson import ObjectId

from app.exceptions import DatabaseError, InvalidIdentifierError
from app.models.beneficio import serialize_document, strip_identifier, to_object_id


class TestToObjectId:

    def test_valid_hex(self):
        oid = ObjectId()
        assert to_object_id(str(oid)) == oid

    def test_passthrough(self):
        oid = ObjectId()
        assert to_object_id(oid) is oid

    @pytest.mark.parametrize("raw", ["abc", "665f1c2e9b1e8a3d4c5b6a7", "z" * 24, 42])
    def test_malformed(self, raw):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            to_object_id(raw)
        # storage-layer failure, reported as 500
        assert isinstance(exc_info.value, DatabaseError)
        assert exc_info.value.status_code == 500

    def test_none_is_rejected(self):
        """ObjectId(None) would generate a new id; we refuse instead."""
        with pytest.raises(InvalidIdentifierError):
            to_object_id(None)


class TestStripIdentifier:

    def test_id_removed(self):
        identifier, fields = strip_identifier({"id": "x", "nome": "Cesta"})
        assert identifier == "x"
        assert fields == {"nome": "Cesta"}

    def test_legacy_underscore_id(self):
        identifier, fields = strip_identifier({"_id": "y", "nome": "Cesta"})
        assert identifier == "y"
        assert "_id" not in fields

    def test_id_wins_over_underscore_id(self):
        identifier, fields = strip_identifier({"_id": "y", "id": "x", "nome": "Cesta"})
        assert identifier == "x"
        assert fields == {"nome": "Cesta"}

    def test_no_identifier(self):
        body = {"nome": "Cesta"}
        identifier, fields = strip_identifier(body)
        assert identifier is None
        assert fields == body
        assert fields is not body


class TestSerializeDocument:

    def test_id_renamed_and_stringified(self):
        oid = ObjectId()
        doc = serialize_document({"_id": oid, "nome": "Cesta"})
        assert doc == {"id": str(oid), "nome": "Cesta"}
        assert list(doc)[0] == "id"

    def test_nested_object_ids(self):
        ref = ObjectId()
        doc = serialize_document({"_id": ObjectId(), "refs": [ref], "meta": {"origem": ref}})
        assert doc["refs"] == [str(ref)]
        assert doc["meta"]["origem"] == str(ref)

    def test_without_id(self):
        assert serialize_document({"nome": "Cesta"}) == {"nome": "Cesta"}
