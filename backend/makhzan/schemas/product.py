from pydantic import BaseModel, field_validator
from datetime import datetime, date
from decimal import Decimal, InvalidOperation


# Category code -> Arabic display name
CATEGORIES = {
    "electronics": "إلكترونيات",
    "clothing": "ملابس",
    "food": "مواد غذائية",
    "books": "كتب",
    "tools": "أدوات",
    "other": "أخرى",
}
DEFAULT_CATEGORY = "other"

SORT_FIELDS = (
    "name",
    "code",
    "category",
    "quantity",
    "min_quantity",
    "price",
    "location",
    "supplier",
    "expiry_date",
    "created_at",
    "updated_at",
)


def category_code(value) -> str:
    """Map a category code or its Arabic display name to a known code."""
    if value is None:
        return DEFAULT_CATEGORY
    text = str(value).strip()
    if text.lower() in CATEGORIES:
        return text.lower()
    for code, name in CATEGORIES.items():
        if name == text:
            return code
    return DEFAULT_CATEGORY


def category_name(code: str) -> str:
    return CATEGORIES.get(code, CATEGORIES[DEFAULT_CATEGORY])


def _to_decimal(value, field: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field} is required")
    text = str(value).strip()
    if not text:
        raise ValueError(f"{field} is required")
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"{field} must be a number, got {text!r}")
    if not number.is_finite():
        raise ValueError(f"{field} must be a finite number")
    return number


def coerce_count(value, field: str = "quantity") -> int:
    """Coerce to a non-negative integer, truncating decimals ("12.7" -> 12)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return max(0, value)
    return max(0, int(_to_decimal(value, field)))


def coerce_price(value) -> Decimal:
    """Coerce to a non-negative Decimal."""
    return max(Decimal("0"), _to_decimal(value, "price"))


class ProductBase(BaseModel):
    name: str
    code: str
    category: str = DEFAULT_CATEGORY
    quantity: int
    min_quantity: int = 0
    price: Decimal
    location: str = ""
    supplier: str = ""
    expiry_date: date | None = None
    description: str = ""

    @field_validator("name", "code", mode="before")
    @classmethod
    def _required_text(cls, value, info):
        if value is None or isinstance(value, bool):
            raise ValueError(f"{info.field_name} is required")
        text = str(value).strip()
        if not text:
            raise ValueError(f"{info.field_name} is required")
        return text

    @field_validator("location", "supplier", "description", mode="before")
    @classmethod
    def _optional_text(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        return category_code(value)

    @field_validator("quantity", "min_quantity", mode="before")
    @classmethod
    def _non_negative_int(cls, value, info):
        if info.field_name == "min_quantity":
            # The reorder threshold is optional: blank or unreadable means 0
            try:
                return coerce_count(value, info.field_name)
            except ValueError:
                return 0
        return coerce_count(value, info.field_name)

    @field_validator("price", mode="before")
    @classmethod
    def _non_negative_price(cls, value):
        return coerce_price(value)

    @field_validator("expiry_date", mode="before")
    @classmethod
    def _blank_date(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, str):
            # Accept full ISO timestamps as well as plain dates
            return value.strip()[:10]
        return value


class ProductCreate(ProductBase):
    pass


class Product(ProductBase):
    id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        # Older blobs stored numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class StockUpdate(BaseModel):
    quantity: int
    reason: str = ""


class InventoryStats(BaseModel):
    total_products: int
    total_quantity: int
    total_value: Decimal
    low_stock_count: int
    low_stock_products: list[Product]


class ImportResult(BaseModel):
    imported: int
    errors: list[str]
    total_rows: int
