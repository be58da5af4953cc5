"""
Pydantic schema definitions for the catalog module.

The ``CatalogItem`` model captures the fields required to render an
image card and its detail page in the front‑end; ``Banner`` only
carries the image to show in the home page carousel. Documents in the
store have no enforced schema, so every field is optional and a
missing field serializes as ``null`` rather than disappearing from the
payload.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StoredDocument(BaseModel):
    """Base for records read from a collection.

    The store-assigned identifier is exposed under ``_id`` (as clients
    already expect) and held internally as ``id``. Unknown document
    keys such as a ``__v`` version counter are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")

    @field_validator("*", mode="before")
    @classmethod
    def scalars_as_text(cls, value: Any) -> Any:
        # Stored values are not typed; render scalars the way the
        # front-end has always received them.
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, (int, float, ObjectId)):
            return str(value)
        return value

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        data = dict(doc)
        data["_id"] = str(data.get("_id"))
        return cls.model_validate(data)


class CatalogItem(_StoredDocument):
    """A single entry of the ``details`` collection."""

    imageUrl: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    locateUsUrl: Optional[str] = None
    applyNowUrl: Optional[str] = None
    applyNowButtonName: Optional[str] = None


class Banner(_StoredDocument):
    """A single entry of the ``banners`` collection."""

    imageUrl: Optional[str] = None


class ErrorBody(BaseModel):
    """Shape of every JSON error response."""

    error: str


class HealthStatus(BaseModel):
    status: str
    database: str
