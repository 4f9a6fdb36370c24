"""
Errors raised by the inventory services.

Validation and not-found errors are raised to the immediate caller and never
change state; persistence errors are caught by the store and reported through
its ``persistence_failed`` signal instead.
"""
from pydantic import ValidationError

# Arabic rejection messages for the required product fields
REQUIRED_FIELD_MESSAGES = {
    "name": "اسم المنتج مطلوب",
    "code": "كود المنتج مطلوب",
    "quantity": "الكمية مطلوبة",
    "price": "السعر مطلوب",
}


class ProductValidationError(Exception):
    """Raised when a product is missing a required field or has a malformed one."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "ProductValidationError":
        messages = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "product"
            detail = str(error.get("msg", "invalid value"))
            if error["type"] == "missing" or detail.endswith("is required"):
                messages.append(REQUIRED_FIELD_MESSAGES.get(field, f"{field} is required"))
            else:
                messages.append(f"{field}: {detail}")
        return cls(messages)


class ProductNotFoundError(Exception):
    """Raised when an operation references a product id that is not stored."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class PersistenceError(Exception):
    """Raised by the state storage when the blob cannot be read or written."""
    pass
