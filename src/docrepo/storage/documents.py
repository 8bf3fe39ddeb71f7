"""
Document contract for storable entities.

A document type binds itself to a collection with the ``__collection__``
class constant::

    class Book(Document):
        __collection__ = "books"

        title: str
        author: str
"""
from typing import Any, ClassVar, Dict, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigurationError


def to_store_id(document_id: str) -> Union[ObjectId, str]:
    """Map a public string id to its stored representation."""
    if ObjectId.is_valid(document_id):
        return ObjectId(document_id)
    return document_id


class Document(BaseModel):
    """Base model for every entity stored through a repository.

    Ids are strings on the model. Any id that is 24-character hex, whether
    generated or supplied by the caller, is stored and looked up as a BSON
    ``ObjectId``; every other string is stored as-is. A document another
    producer wrote with a 24-hex *string* ``_id`` is therefore not reachable
    by id through this layer.
    """

    __collection__: ClassVar[Optional[str]] = None

    id: Optional[str] = Field(default=None, alias="_id")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _object_id_as_str(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @classmethod
    def storage_field(cls, name: str) -> str:
        """Return the store-side name of a model field.

        Unknown names are passed through untouched so that the store, not this
        layer, reports a bad sort or filter field.
        """
        field = cls.model_fields.get(name)
        if field is not None and field.alias:
            return field.alias
        return name

    def to_document(self) -> Dict[str, Any]:
        """Serialize for the store, converting the id to its stored form."""
        data = self.model_dump(by_alias=True)
        if data.get("_id") is None:
            data.pop("_id", None)
        else:
            data["_id"] = to_store_id(data["_id"])
        return data


def resolve_collection_name(document_type: type) -> str:
    """Resolve the collection a document type is bound to.

    Raises:
        ConfigurationError: the type is not a Document or declares no binding.
    """
    if not isinstance(document_type, type) or not issubclass(document_type, Document):
        raise ConfigurationError(
            f"{document_type!r} is not a Document subclass",
            operation="resolve_collection",
        )

    name = getattr(document_type, "__collection__", None)
    if not isinstance(name, str) or not name:
        raise ConfigurationError(
            f"{document_type.__name__} has no collection binding; set __collection__",
            operation="resolve_collection",
        )
    return name
