"""
Product Import Service

Bulk import of products from CSV, Excel (.xlsx) or JSON. Column headers may
be the Arabic labels used by the export (اسم المنتج, كود المنتج, ...) or the
English field names. Every row is validated on its own; a bad row is reported and skipped,
the rest of the file is still imported.
"""
import csv
import json
import logging
import zipfile
from io import BytesIO, StringIO

import pandas as pd

from makhzan.schemas.product import ImportResult
from makhzan.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

# Product field -> accepted column headers, first match wins
COLUMN_ALIASES = {
    "name": ("اسم المنتج", "name"),
    "code": ("كود المنتج", "code"),
    "category": ("التصنيف", "category"),
    "quantity": ("الكمية الحالية", "quantity"),
    "min_quantity": ("الحد الأدنى", "min_quantity", "minQuantity"),
    "price": ("السعر", "price"),
    "location": ("موقع التخزين", "location"),
    "supplier": ("المورد", "supplier"),
    "expiry_date": ("تاريخ انتهاء الصلاحية", "expiry_date", "expiryDate"),
    "description": ("الوصف", "description"),
}


def normalize_row(row: dict) -> dict:
    """Map a raw import row onto product field names, dropping blank cells."""
    cleaned = {}
    for key, value in row.items():
        if not isinstance(key, str):
            continue  # csv puts surplus cells under None
        if isinstance(value, str):
            value = value.strip()
        cleaned[key.strip().lstrip("\ufeff")] = value

    normalized = {}
    for field, headers in COLUMN_ALIASES.items():
        for header in headers:
            value = cleaned.get(header)
            if value is not None and value != "":
                normalized[field] = value
                break
    return normalized


def import_products_from_csv(csv_content: str, store: InventoryStore) -> ImportResult:
    """
    Import products from CSV content.

    Expected CSV format (Arabic or English headers):
    name,code,category,quantity,min_quantity,price,location,supplier,expiry_date,description
    """
    reader = csv.DictReader(StringIO(csv_content.lstrip("\ufeff")))
    rows = [
        normalize_row(row)
        for row in reader
        if any(isinstance(v, str) and v.strip() for v in row.values())
    ]
    # Row 1 is the header
    return store.import_products(rows, first_row_number=2)


def import_products_from_xlsx(xlsx_content: bytes, store: InventoryStore) -> ImportResult:
    """
    Import products from the first worksheet of an Excel workbook, using the
    same headers as the CSV import.
    """
    try:
        sheet = pd.read_excel(BytesIO(xlsx_content), sheet_name=0, dtype=str).fillna("")
    except (ValueError, KeyError, zipfile.BadZipFile) as e:
        logger.warning(f"Rejected Excel import: {e}")
        return ImportResult(imported=0, errors=[f"Invalid Excel file: {str(e)}"], total_rows=0)

    rows = [
        normalize_row(row)
        for row in sheet.to_dict(orient="records")
        if any(isinstance(v, str) and v.strip() for v in row.values())
    ]
    # Row 1 is the header
    return store.import_products(rows, first_row_number=2)


def import_products_from_json(json_content: str, store: InventoryStore) -> ImportResult:
    """
    Import products from JSON content: an array of product objects, a single
    object, or a full JSON export (its "products" list is imported).
    """
    try:
        data = json.loads(json_content)
    except json.JSONDecodeError as e:
        logger.warning(f"Rejected JSON import: {e}")
        return ImportResult(imported=0, errors=[f"Invalid JSON: {str(e)}"], total_rows=0)

    if isinstance(data, dict) and isinstance(data.get("products"), list):
        data = data["products"]
    if not isinstance(data, list):
        data = [data]

    rows = [normalize_row(item) if isinstance(item, dict) else {} for item in data]
    return store.import_products(rows)


def get_csv_template() -> str:
    """Get a CSV template with example data."""
    return """name,code,category,quantity,min_quantity,price,location,supplier,expiry_date,description
لابتوب Dell,LAP001,electronics,15,5,2500,رف A - مستوى 1,شركة التقنية المتقدمة,,لابتوب Dell Inspiron 15
حليب طازج,MLK001,food,40,10,6.5,ثلاجة 2,مزارع الوادي,2026-11-01,
كتاب محاسبة,BK001,books,8,2,45,رف C,دار النشر,,
"""


def get_json_template() -> list:
    """Get a JSON template with example data."""
    return [
        {
            "name": "لابتوب Dell",
            "code": "LAP001",
            "category": "electronics",
            "quantity": 15,
            "min_quantity": 5,
            "price": 2500,
            "location": "رف A - مستوى 1",
            "supplier": "شركة التقنية المتقدمة",
            "expiry_date": None,
            "description": "لابتوب Dell Inspiron 15",
        },
        {
            "name": "حليب طازج",
            "code": "MLK001",
            "category": "food",
            "quantity": 40,
            "min_quantity": 10,
            "price": 6.5,
            "location": "ثلاجة 2",
            "supplier": "مزارع الوادي",
            "expiry_date": "2026-11-01",
            "description": "",
        },
    ]
