"""
Product Export Service

CSV export uses the Arabic column labels and starts with a UTF-8 BOM so that
spreadsheet applications detect the encoding. The Excel workbook carries the
same columns on a products sheet plus a statistics sheet. Both files can be
imported back through ``data_import``.
"""
import csv
from io import BytesIO, StringIO
from typing import Iterable

import pandas as pd

from makhzan.schemas.product import InventoryStats, Product, category_name

UTF8_BOM = "\ufeff"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PRODUCTS_SHEET = "المنتجات"
SUMMARY_SHEET = "الإحصائيات"

# (product field, column label)
PRODUCT_COLUMNS = [
    ("name", "اسم المنتج"),
    ("code", "كود المنتج"),
    ("category", "التصنيف"),
    ("quantity", "الكمية الحالية"),
    ("min_quantity", "الحد الأدنى"),
    ("price", "السعر"),
    ("location", "موقع التخزين"),
    ("supplier", "المورد"),
    ("expiry_date", "تاريخ انتهاء الصلاحية"),
    ("description", "الوصف"),
]
PRODUCT_HEADERS = [label for _, label in PRODUCT_COLUMNS]


def product_row(product: Product) -> dict:
    """One export row keyed by the Arabic column labels."""
    row = {}
    for field, label in PRODUCT_COLUMNS:
        value = getattr(product, field)
        if field == "category":
            value = category_name(value)
        elif value is None:
            value = ""
        row[label] = value
    return row


def rows_to_csv(rows: list[dict], headers: list[str]) -> str:
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=headers, extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)
    return UTF8_BOM + output.getvalue()


def rows_to_xlsx(sheets: dict[str, tuple[list[str], list[dict]]]) -> bytes:
    """Write one worksheet per entry of ``{sheet name: (headers, rows)}``."""
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, (headers, rows) in sheets.items():
            frame = pd.DataFrame(rows, columns=headers)
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def product_table(products: Iterable[Product]) -> tuple[list[str], list[dict]]:
    return PRODUCT_HEADERS, [product_row(p) for p in products]


def export_products_csv(products: Iterable[Product]) -> str:
    headers, rows = product_table(products)
    return rows_to_csv(rows, headers)


def export_products_xlsx(products: Iterable[Product], stats: InventoryStats, currency: str) -> bytes:
    """Workbook with the product list and the inventory statistics."""
    headers = PRODUCT_HEADERS + ["تاريخ الإنشاء", "تاريخ التحديث"]
    rows = []
    for product in products:
        row = product_row(product)
        row["السعر"] = float(product.price)
        row["تاريخ انتهاء الصلاحية"] = product.expiry_date.isoformat() if product.expiry_date else ""
        row["تاريخ الإنشاء"] = product.created_at.date().isoformat()
        row["تاريخ التحديث"] = product.updated_at.date().isoformat()
        rows.append(row)

    summary = [
        {"الإحصائية": "إجمالي المنتجات", "القيمة": stats.total_products},
        {"الإحصائية": "إجمالي الكمية", "القيمة": stats.total_quantity},
        {"الإحصائية": "قيمة المخزون", "القيمة": f"{stats.total_value:,.2f} {currency}"},
        {"الإحصائية": "منتجات منخفضة المخزون", "القيمة": stats.low_stock_count},
    ]
    return rows_to_xlsx({
        PRODUCTS_SHEET: (headers, rows),
        SUMMARY_SHEET: (["الإحصائية", "القيمة"], summary),
    })
