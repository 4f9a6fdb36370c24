from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from makhzan.dependencies import get_store
from makhzan.schemas.product import Product
from makhzan.schemas.report import CategoryReportRow, ReportSummary
from makhzan.services.data_export import XLSX_MEDIA_TYPE
from makhzan.services.inventory_store import InventoryStore
from makhzan.services.reports import (
    REPORT_TABLES,
    category_report,
    low_stock_report,
    report_csv,
    report_summary,
    report_xlsx,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
async def get_summary(store: InventoryStore = Depends(get_store)):
    return report_summary(store)


@router.get("/categories", response_model=list[CategoryReportRow])
async def get_category_report(store: InventoryStore = Depends(get_store)):
    """Products, quantity and value per category."""
    return category_report(store.products)


@router.get("/low-stock", response_model=list[Product])
async def get_low_stock_report(store: InventoryStore = Depends(get_store)):
    """Products at or below their minimum quantity."""
    return low_stock_report(store.products)


@router.get("/export/{kind}")
async def export_report(
    kind: str,
    format: str = Query("csv", pattern="^(csv|xlsx)$"),
    store: InventoryStore = Depends(get_store)
):
    """Download a report (inventory, low-stock or categories) as CSV or Excel."""
    if kind not in REPORT_TABLES:
        raise HTTPException(status_code=404, detail=f"Unknown report: {kind}")

    filename = f"{kind}-report-{date.today().isoformat()}.{format}"
    if format == "xlsx":
        content = report_xlsx(kind, store.products)
        media_type = XLSX_MEDIA_TYPE
    else:
        content = report_csv(kind, store.products)
        media_type = "text/csv; charset=utf-8"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
