"""Admin API endpoints: bulk import/export, backups and the scheduler."""
import json
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.responses import Response
from typing import Optional
from pydantic import BaseModel

from makhzan.dependencies import Services, get_services, get_store, get_scheduler
from makhzan.schemas.product import ImportResult
from makhzan.services.backup import list_backups, write_backup
from makhzan.services.data_export import XLSX_MEDIA_TYPE, export_products_csv, export_products_xlsx
from makhzan.services.data_import import (
    import_products_from_csv,
    import_products_from_json,
    import_products_from_xlsx,
    get_csv_template,
    get_json_template
)
from makhzan.services.inventory_store import InventoryStore
from makhzan.tasks.scheduler import InventoryScheduler

router = APIRouter(prefix="/admin", tags=["admin"])


# ============== Data Import Endpoints ==============

class JsonImportRequest(BaseModel):
    """
    Request body for JSON import: ``{"data": [...]}``, or a file produced by
    /export/json posted as-is (only its products are imported).
    """
    data: Optional[list[dict]] = None
    products: Optional[list[dict]] = None


@router.get("/import/template/csv")
async def get_import_csv_template():
    """Get a CSV template with example data for importing products."""
    return {
        "template": get_csv_template(),
        "instructions": "Upload a CSV file with columns: name, code, category, quantity, min_quantity, price, location, supplier, expiry_date, description"
    }


@router.get("/import/template/json")
async def get_import_json_template():
    """Get a JSON template with example data for importing products."""
    return {
        "template": get_json_template(),
        "instructions": "Submit a JSON array of product objects"
    }


@router.post("/import/csv", response_model=ImportResult)
async def import_csv(file: UploadFile = File(...), store: InventoryStore = Depends(get_store)):
    """
    Import products from a CSV file.

    Headers may be the Arabic export labels or the English field names.
    """
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(status_code=400, detail="File must be a CSV")

    content = await file.read()
    try:
        csv_content = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded")

    return import_products_from_csv(csv_content, store)


@router.post("/import/xlsx", response_model=ImportResult)
async def import_xlsx(file: UploadFile = File(...), store: InventoryStore = Depends(get_store)):
    """
    Import products from the first sheet of an Excel workbook.

    Headers are the same as for CSV import.
    """
    if not file.filename or not file.filename.lower().endswith('.xlsx'):
        raise HTTPException(status_code=400, detail="File must be an Excel .xlsx workbook")

    content = await file.read()
    return import_products_from_xlsx(content, store)


@router.post("/import/json", response_model=ImportResult)
async def import_json(request: JsonImportRequest, store: InventoryStore = Depends(get_store)):
    """Import products from a JSON array of product objects."""
    rows = request.data if request.data is not None else request.products
    if rows is None:
        raise HTTPException(status_code=422, detail="Body must contain \"data\" or \"products\"")

    json_content = json.dumps(rows, ensure_ascii=False)
    return import_products_from_json(json_content, store)


# ============== Data Export Endpoints ==============

@router.get("/export/csv")
async def export_csv(store: InventoryStore = Depends(get_store)):
    """Download all products as CSV with Arabic column labels."""
    filename = f"inventory-{date.today().isoformat()}.csv"
    return Response(
        content=export_products_csv(store.products),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/export/xlsx")
async def export_xlsx(store: InventoryStore = Depends(get_store)):
    """Download an Excel workbook with a products sheet and a statistics sheet."""
    filename = f"inventory-{date.today().isoformat()}.xlsx"
    return Response(
        content=export_products_xlsx(store.products, store.get_stats(), store.settings.currency),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/export/json")
async def export_json(store: InventoryStore = Depends(get_store)):
    """Download the full state (products, settings, language) as JSON."""
    filename = f"inventory-{date.today().isoformat()}.json"
    return Response(
        content=json.dumps(store.snapshot(), ensure_ascii=False, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# ============== Backups ==============

@router.post("/backup")
async def create_backup(services: Services = Depends(get_services)):
    """Write a backup file now."""
    try:
        path = write_backup(services.store, services.config.backup_dir)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Backup failed: {e}")
    return {"message": "Backup written", "filename": path.name}


@router.get("/backups")
async def get_backups(services: Services = Depends(get_services)):
    """List backup files, newest first."""
    return {"backups": list_backups(services.config.backup_dir)}


# ============== Scheduler ==============

@router.get("/scheduler/status")
async def scheduler_status(scheduler: InventoryScheduler = Depends(get_scheduler)):
    """Get the current scheduler status and last run results."""
    return scheduler.status()


@router.post("/scheduler/start")
async def start_scheduler_endpoint(scheduler: InventoryScheduler = Depends(get_scheduler)):
    """Start the background scheduler."""
    scheduler.start()
    return {"message": "Scheduler started", "status": scheduler.status()}


@router.post("/scheduler/stop")
async def stop_scheduler_endpoint(scheduler: InventoryScheduler = Depends(get_scheduler)):
    """Stop the background scheduler."""
    scheduler.stop()
    return {"message": "Scheduler stopped"}
