"""
Unit tests for the document contract and collection binding.
"""

import pytest
from bson import ObjectId
from pydantic import Field

from docrepo.storage.documents import Document, resolve_collection_name, to_store_id
from docrepo.storage.exceptions import ConfigurationError

from tests.models import Book


class Unbound(Document):
    name: str


class Aliased(Document):
    __collection__ = "aliased"

    display_name: str = Field(alias="displayName")


def test_resolves_bound_collection():
    assert resolve_collection_name(Book) == "books"


def test_unbound_type_is_configuration_error():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve_collection_name(Unbound)
    assert "Unbound" in str(exc_info.value)


def test_non_document_type_is_configuration_error():
    with pytest.raises(ConfigurationError):
        resolve_collection_name(dict)


def test_storage_field_maps_aliases():
    assert Book.storage_field("id") == "_id"
    assert Book.storage_field("title") == "title"
    assert Aliased.storage_field("display_name") == "displayName"
    assert Book.storage_field("no_such_field") == "no_such_field"


def test_object_id_round_trip():
    oid = ObjectId()
    book = Book.model_validate({"_id": oid, "title": "Dune", "author": "Herbert"})
    assert book.id == str(oid)
    assert book.to_document()["_id"] == oid


def test_plain_string_id_kept():
    book = Book(id="isbn-0441013597", title="Dune", author="Herbert")
    assert book.to_document()["_id"] == "isbn-0441013597"
    assert to_store_id("isbn-0441013597") == "isbn-0441013597"


def test_hex_string_id_stored_as_object_id():
    hex_id = "65a1f0c2b3d4e5f601234567"
    book = Book(id=hex_id, title="Dune", author="Herbert")

    stored = book.to_document()["_id"]
    assert isinstance(stored, ObjectId)
    assert stored == ObjectId(hex_id)
    assert to_store_id(hex_id) == ObjectId(hex_id)


def test_unset_id_omitted_from_document():
    assert "_id" not in Book(title="Dune", author="Herbert").to_document()
