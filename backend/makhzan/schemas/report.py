from pydantic import BaseModel
from decimal import Decimal


class CategoryReportRow(BaseModel):
    category: str
    category_name: str
    count: int
    total_quantity: int
    total_value: Decimal
    value_share: float  # percent of total inventory value


class ReportSummary(BaseModel):
    total_products: int
    total_quantity: int
    total_value: Decimal
    low_stock_count: int
    out_of_stock_count: int
    category_count: int
    currency: str
