from makhzan.schemas.product import (
    Product, ProductCreate, StockUpdate, InventoryStats, ImportResult
)
from makhzan.schemas.settings import StoreSettings, ColorSchemeUpdate, LanguageUpdate
from makhzan.schemas.notification import NotificationCreate, NotificationRecord, UnreadCount
from makhzan.schemas.alert import AlertCheckResponse, AlertSummary
from makhzan.schemas.report import CategoryReportRow, ReportSummary

__all__ = [
    "Product", "ProductCreate", "StockUpdate", "InventoryStats", "ImportResult",
    "StoreSettings", "ColorSchemeUpdate", "LanguageUpdate",
    "NotificationCreate", "NotificationRecord", "UnreadCount",
    "AlertCheckResponse", "AlertSummary",
    "CategoryReportRow", "ReportSummary",
]
