from typing import Any
from fastapi import APIRouter, Body, Depends, HTTPException, Query

from makhzan.dependencies import get_store
from makhzan.schemas.product import Product, InventoryStats, StockUpdate
from makhzan.services.errors import ProductValidationError, ProductNotFoundError
from makhzan.services.inventory_store import InventoryStore

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[Product])
async def list_products(
    search: str = Query("", description="Matches name or code, case-insensitive"),
    category: str = Query("", description="Exact category code, empty for all"),
    sort_by: str = "name",
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    store: InventoryStore = Depends(get_store)
):
    """List products with optional search, category filter and sorting."""
    try:
        return store.get_filtered_products(search, category, sort_by, sort_order)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/stats", response_model=InventoryStats)
async def get_stats(store: InventoryStore = Depends(get_store)):
    """Totals and the low-stock list, computed from the current products."""
    return store.get_stats()


@router.get("/by-code/{code}", response_model=list[Product])
async def get_products_by_code(code: str, store: InventoryStore = Depends(get_store)):
    """All products with this code (e.g. after a barcode scan)."""
    return store.find_by_code(code)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, store: InventoryStore = Depends(get_store)):
    product = store.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=Product, status_code=201)
async def create_product(
    payload: dict[str, Any] = Body(...),
    store: InventoryStore = Depends(get_store)
):
    """Add a product. name, code, quantity and price are required."""
    try:
        return store.add_product(payload)
    except ProductValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    payload: dict[str, Any] = Body(...),
    store: InventoryStore = Depends(get_store)
):
    """Update a product; fields left out keep their current value."""
    try:
        return store.update_product(product_id, payload)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except ProductValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})


@router.delete("/{product_id}")
async def delete_product(product_id: str, store: InventoryStore = Depends(get_store)):
    """Delete a product. Deleting an unknown id succeeds without doing anything."""
    deleted = store.delete_product(product_id)
    return {"status": "deleted", "deleted": deleted is not None}


@router.post("/{product_id}/stock", response_model=Product)
async def update_stock(
    product_id: str,
    stock: StockUpdate,
    store: InventoryStore = Depends(get_store)
):
    """Set the stock quantity of a product (negative values become 0)."""
    try:
        return store.update_stock(product_id, stock.quantity, stock.reason)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
