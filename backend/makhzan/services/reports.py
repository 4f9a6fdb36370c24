"""
Inventory Reports

Summary figures, a per-category breakdown and the low-stock listing, plus CSV
and Excel renderings of each for download.
"""
from decimal import Decimal
from typing import Iterable

from makhzan.schemas.product import Product, category_name
from makhzan.schemas.report import CategoryReportRow, ReportSummary
from makhzan.services.data_export import product_table, rows_to_csv, rows_to_xlsx
from makhzan.services.inventory_store import InventoryStore


def report_summary(store: InventoryStore) -> ReportSummary:
    stats = store.get_stats()
    products = store.products
    return ReportSummary(
        total_products=stats.total_products,
        total_quantity=stats.total_quantity,
        total_value=stats.total_value,
        low_stock_count=stats.low_stock_count,
        out_of_stock_count=sum(1 for p in products if p.quantity == 0),
        category_count=len({p.category for p in products}),
        currency=store.settings.currency,
    )


def category_report(products: Iterable[Product]) -> list[CategoryReportRow]:
    """Count, quantity and value per category, largest value first."""
    groups: dict[str, dict] = {}
    for product in products:
        group = groups.setdefault(product.category, {
            "count": 0,
            "total_quantity": 0,
            "total_value": Decimal("0"),
        })
        group["count"] += 1
        group["total_quantity"] += product.quantity
        group["total_value"] += product.price * product.quantity

    grand_total = sum((g["total_value"] for g in groups.values()), Decimal("0"))
    rows = [
        CategoryReportRow(
            category=category,
            category_name=category_name(category),
            count=group["count"],
            total_quantity=group["total_quantity"],
            total_value=group["total_value"],
            value_share=round(float(group["total_value"] / grand_total * 100), 2) if grand_total else 0.0,
        )
        for category, group in groups.items()
    ]
    rows.sort(key=lambda r: r.total_value, reverse=True)
    return rows


def low_stock_report(products: Iterable[Product]) -> list[Product]:
    """Products at or below their reorder threshold, emptiest first."""
    low = [p for p in products if p.quantity <= p.min_quantity]
    low.sort(key=lambda p: (p.quantity - p.min_quantity, p.name.lower()))
    return low


def category_report_table(products: Iterable[Product]) -> tuple[list[str], list[dict]]:
    headers = ["التصنيف", "عدد المنتجات", "إجمالي الكمية", "إجمالي القيمة", "النسبة %"]
    rows = [
        {
            "التصنيف": row.category_name,
            "عدد المنتجات": row.count,
            "إجمالي الكمية": row.total_quantity,
            "إجمالي القيمة": row.total_value,
            "النسبة %": row.value_share,
        }
        for row in category_report(products)
    ]
    return headers, rows


def low_stock_report_table(products: Iterable[Product]) -> tuple[list[str], list[dict]]:
    headers = ["اسم المنتج", "كود المنتج", "الكمية الحالية", "الحد الأدنى", "النقص", "المورد"]
    rows = [
        {
            "اسم المنتج": p.name,
            "كود المنتج": p.code,
            "الكمية الحالية": p.quantity,
            "الحد الأدنى": p.min_quantity,
            "النقص": p.min_quantity - p.quantity,
            "المورد": p.supplier,
        }
        for p in low_stock_report(products)
    ]
    return headers, rows


# Report kind -> (sheet name, table builder)
REPORT_TABLES = {
    "inventory": ("المخزون", product_table),
    "low-stock": ("مخزون منخفض", low_stock_report_table),
    "categories": ("التصنيفات", category_report_table),
}


def report_csv(kind: str, products: Iterable[Product]) -> str:
    _, build = REPORT_TABLES[kind]
    headers, rows = build(products)
    return rows_to_csv(rows, headers)


def report_xlsx(kind: str, products: Iterable[Product]) -> bytes:
    sheet_name, build = REPORT_TABLES[kind]
    return rows_to_xlsx({sheet_name: build(products)})
