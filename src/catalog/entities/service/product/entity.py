"""Entity: Product."""

from typing import Any

from pydantic import Field, ValidationError, field_validator

from src.catalog.entities._base import MAX_SQL_INTEGER, Entity


class Product(Entity):
    """Product entity representing an item of the catalog.

    This is the domain model that carries the validation rules. The ``id`` is
    left empty until the store assigns one.
    """

    name: str = Field(max_length=255, description="Name, never blank")
    price: float = Field(gt=0, allow_inf_nan=False, description="Unit price")
    description: str | None = Field(
        default=None, max_length=1000, description="Free text description"
    )
    stock: int = Field(
        default=0, ge=0, le=MAX_SQL_INTEGER, description="Units available"
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.price == other.price
            and self.description == other.description
            and self.stock == other.stock
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.price,
            self.description,
            self.stock,
        ))


def validation_messages(exc: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into one message per violation."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "product"
        if error["type"] == "value_error":
            detail = str(error["ctx"]["error"])
        else:
            detail = error["msg"]
        messages.append(f"{field}: {detail}")
    return messages


def validate_product(payload: dict[str, Any]) -> tuple[Product | None, list[str]]:
    """Validate a submitted payload.

    Returns the product and an empty list when the payload is valid, or
    ``None`` and the list of violations otherwise. Timestamps are never taken
    from the client.
    """
    candidate = {
        key: value
        for key, value in payload.items()
        if key not in ("created_at", "updated_at")
    }
    try:
        return Product.model_validate(candidate), []
    except ValidationError as exc:
        return None, validation_messages(exc)
