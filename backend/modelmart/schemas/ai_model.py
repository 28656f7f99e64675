"""Model Listing Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Wire names are camelCase (modelName, imageUrl, developerEmail, ...);
      Python attributes are snake_case
    - price >= 0 on both create and update; strings like "10" are coerced
    - ModelUpdate carries no owner, counter or timestamp fields, so a payload
      cannot reach them whatever it contains
    - Required listing text (modelName, category, description, imageUrl) can
      never be blanked: create requires it, update rejects blank values

Design Decisions:
    - alias_generator=to_camel with populate_by_name: one schema serves the
      legacy camelCase frontend and snake_case tests
    - Unknown keys ignored rather than rejected: the listing form posts extras
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, protected_namespaces=(),
    )


class ModelCreate(_CamelModel):
    """Listing creation — required descriptive fields plus the owner's email."""
    model_name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=10_000)
    image_url: str = Field(min_length=1, max_length=2_000)
    developer_email: str = Field(min_length=3, max_length=320)
    developer_name: str | None = Field(None, max_length=200)
    name: str | None = Field(None, max_length=200)
    framework: str | None = Field(None, max_length=100)
    use_case: str | None = Field(None, max_length=200)
    dataset: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)

    @field_validator("model_name", "category", "description", "image_url", "developer_email")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v


class ModelUpdate(_CamelModel):
    """Partial listing update — only mutable descriptive fields."""
    model_name: str | None = Field(None, min_length=1, max_length=200)
    category: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=10_000)
    image_url: str | None = Field(None, max_length=2_000)
    developer_name: str | None = Field(None, max_length=200)
    use_case: str | None = Field(None, max_length=200)
    dataset: str | None = Field(None, max_length=200)
    price: float | None = Field(None, ge=0)

    @field_validator("model_name", "category", "description", "image_url")
    @classmethod
    def strip_present(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v


class ModelResponse(_CamelModel):
    """Listing as returned to clients."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
        from_attributes=True, protected_namespaces=(),
    )

    id: UUID
    model_name: str
    name: str
    category: str
    framework: str
    use_case: str
    dataset: str
    description: str
    image_url: str
    price: float
    developer_email: str
    developer_uid: str | None = None
    developer_name: str | None = None
    purchased: int
    created_at: datetime


class DeleteResponse(_CamelModel):
    acknowledged: bool = True
    deleted_count: int
