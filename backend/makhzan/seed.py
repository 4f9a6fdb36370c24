"""
Sample products loaded on the very first run (when no state has been saved yet).

Disable with SEED_SAMPLE_PRODUCTS=false.
"""

SAMPLE_PRODUCTS = [
    {
        "name": "لابتوب Dell",
        "code": "LAP001",
        "category": "electronics",
        "quantity": 15,
        "min_quantity": 5,
        "price": "2500",
        "expiry_date": "2025-12-31",
        "location": "رف A - مستوى 1",
        "supplier": "شركة التقنية المتقدمة",
        "description": "لابتوب Dell Inspiron 15 - معالج Intel Core i5",
    },
    {
        "name": "ماوس لاسلكي",
        "code": "MOU001",
        "category": "electronics",
        "quantity": 50,
        "min_quantity": 10,
        "price": "75",
        "expiry_date": "2026-06-15",
        "location": "رف B - مستوى 2",
        "supplier": "مؤسسة الإلكترونيات",
        "description": "ماوس لاسلكي بتقنية Bluetooth",
    },
]


def sample_products() -> list[dict]:
    return [dict(product) for product in SAMPLE_PRODUCTS]
