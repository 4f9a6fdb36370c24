"""
Inventory Store

Single source of truth for products, settings and the UI language. Every
mutation is applied in memory, announced in the notification log and then
persisted as one blob through StateStorage.

The store is constructed explicitly and handed to whatever needs it; call
``load()`` once before use and ``close()`` on shutdown.
"""
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Optional
from pydantic import BaseModel, ValidationError

from makhzan.schemas.product import (
    Product, ProductBase, ProductCreate, InventoryStats, ImportResult, SORT_FIELDS, coerce_count
)
from makhzan.schemas.settings import StoreSettings
from makhzan.services import messages
from makhzan.services.errors import ProductValidationError, ProductNotFoundError, PersistenceError
from makhzan.services.events import Signal
from makhzan.services.notification_log import NotificationLog, utc_now
from makhzan.services.persistence import StateStorage
from makhzan.services.settings_merge import resolve_settings

logger = logging.getLogger(__name__)

STATE_VERSION = 1
PRODUCT_FIELDS = tuple(ProductBase.model_fields)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    DEFAULTS_LOADED = "defaults_loaded"
    PERSISTED_MERGE_APPLIED = "persisted_merge_applied"
    READY = "ready"


class InventoryStore:
    def __init__(
        self,
        storage: StateStorage,
        notifications: NotificationLog,
        clock: Callable[[], datetime] = utc_now,
        initial_products: Optional[list[dict]] = None,
    ):
        self._storage = storage
        self._notifications = notifications
        self._clock = clock
        self._initial_products = initial_products or []

        self._products: list[Product] = []
        self._settings = StoreSettings()
        self._language = self._settings.language

        self.state = StoreState.UNINITIALIZED
        self.last_persistence_error: Optional[PersistenceError] = None
        self._load_failed = False

        # Fired with the new StoreSettings after update/reset/colour changes
        self.settings_changed = Signal("settings_changed")
        # Fired with the PersistenceError when the blob cannot be written
        self.persistence_failed = Signal("persistence_failed")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> "InventoryStore":
        """Load defaults, then merge the persisted blob over them if one exists."""
        self._products = []
        self._settings = StoreSettings()
        self._language = self._settings.language
        self.state = StoreState.DEFAULTS_LOADED
        self._load_failed = False

        try:
            blob = self._storage.load()
        except PersistenceError as e:
            # Keep running on defaults; do not seed, so nothing overwrites the stored blob
            # until the first real mutation.
            self._report_persistence_failure(e)
            self._load_failed = True
            self.state = StoreState.READY
            return self

        if blob is None:
            self._products = self._restore_products(self._initial_products)
            if self._products:
                logger.info(f"First run: seeded {len(self._products)} sample products")
                self._persist()
        else:
            self._products = self._restore_products(blob.get("products"))
            self._settings = resolve_settings(blob.get("settings"))
            language = blob.get("language")
            self._language = language if isinstance(language, str) and language else self._settings.language
            self.state = StoreState.PERSISTED_MERGE_APPLIED

        self.state = StoreState.READY
        logger.info(f"Inventory store ready with {len(self._products)} products")
        return self

    def close(self) -> None:
        """
        Write the final state and return to the uninitialized state. After a
        failed load nothing is written unless a mutation has happened since.
        """
        if self.state == StoreState.READY and not self._load_failed:
            self._persist()
        self.state = StoreState.UNINITIALIZED

    def _require_ready(self) -> None:
        if self.state != StoreState.READY:
            raise RuntimeError("Inventory store is not loaded; call load() first")

    def _restore_products(self, raw_products) -> list[Product]:
        if not isinstance(raw_products, list):
            return []

        products: list[Product] = []
        seen_ids: set[str] = set()
        now = self._clock()
        for index, raw in enumerate(raw_products):
            if not isinstance(raw, dict):
                logger.warning(f"Skipping persisted product #{index}: not an object")
                continue
            data = dict(raw)
            data.setdefault("created_at", now)
            data.setdefault("updated_at", data["created_at"])
            if not data.get("id"):
                data["id"] = uuid.uuid4().hex
            try:
                product = Product.model_validate(data)
            except ValidationError as e:
                logger.warning(f"Skipping persisted product #{index}: {e.error_count()} invalid field(s)")
                continue
            if product.id in seen_ids:
                product = product.model_copy(update={"id": uuid.uuid4().hex})
                logger.warning(f"Persisted product #{index} had a duplicate id; assigned {product.id}")
            seen_ids.add(product.id)
            products.append(product)
        return products

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def settings(self) -> StoreSettings:
        return self._settings.model_copy(deep=True)

    @property
    def language(self) -> str:
        return self._language

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def find_by_code(self, code: str) -> list[Product]:
        """All products with this code (codes are not unique)."""
        wanted = code.strip().lower()
        return [p for p in self._products if p.code.lower() == wanted]

    def get_filtered_products(
        self,
        search_term: str = "",
        category_filter: str = "",
        sort_field: str = "name",
        sort_order: str = "asc",
    ) -> list[Product]:
        """
        Products whose name or code contains search_term (case-insensitive) and
        whose category equals category_filter (empty means any), sorted stably
        by sort_field. Products without a value for the field are listed last.
        """
        if sort_field not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {sort_field}")
        if sort_order not in ("asc", "desc"):
            raise ValueError(f"Unknown sort order: {sort_order}")

        term = (search_term or "").lower()
        matches = [
            p for p in self._products
            if (not term or term in p.name.lower() or term in p.code.lower())
            and (not category_filter or p.category == category_filter)
        ]

        def sort_key(product: Product):
            value = getattr(product, sort_field)
            return value.lower() if isinstance(value, str) else value

        present = [p for p in matches if getattr(p, sort_field) is not None]
        missing = [p for p in matches if getattr(p, sort_field) is None]
        present.sort(key=sort_key, reverse=(sort_order == "desc"))
        return present + missing

    def get_stats(self) -> InventoryStats:
        """Recomputed on every call."""
        low_stock = [p for p in self._products if p.quantity <= p.min_quantity]
        return InventoryStats(
            total_products=len(self._products),
            total_quantity=sum(p.quantity for p in self._products),
            total_value=sum((p.price * p.quantity for p in self._products), Decimal("0")),
            low_stock_count=len(low_stock),
            low_stock_products=low_stock,
        )

    def snapshot(self) -> dict:
        """The persisted subset of state as a JSON-ready dict."""
        return {
            "version": STATE_VERSION,
            "products": [p.model_dump(mode="json") for p in self._products],
            "settings": self._settings.model_dump(mode="json"),
            "language": self._language,
        }

    # ------------------------------------------------------------------
    # Product mutations
    # ------------------------------------------------------------------

    def add_product(self, data: dict | BaseModel) -> Product:
        """Validate and append a new product. Raises ProductValidationError."""
        self._require_ready()
        fields = self._validated_fields(self._as_dict(data))
        now = self._clock()
        product = Product(id=uuid.uuid4().hex, created_at=now, updated_at=now, **fields)
        self._products.append(product)
        logger.info(f"Product added: {product.name} ({product.code})")

        self._notifications.add_notification(messages.product_added(product.name))
        self._persist()
        return product

    def update_product(self, product_id: str, data: dict | BaseModel) -> Product:
        """
        Apply changes to an existing product. Fields absent from data keep their
        current value; id and created_at never change.

        Raises ProductNotFoundError or ProductValidationError without changing state.
        """
        self._require_ready()
        index = self._index_of(product_id)
        current = self._products[index]

        merged = current.model_dump(include=set(PRODUCT_FIELDS))
        merged.update({k: v for k, v in self._as_dict(data).items() if k in PRODUCT_FIELDS})
        fields = self._validated_fields(merged)

        updated = Product(
            id=current.id,
            created_at=current.created_at,
            updated_at=self._clock(),
            **fields,
        )
        self._products[index] = updated
        logger.info(f"Product updated: {updated.name} ({updated.id})")

        self._notifications.add_notification(messages.product_updated(updated.name))
        self._persist()
        return updated

    def delete_product(self, product_id: str) -> Optional[Product]:
        """Remove a product. Unknown ids are a silent no-op returning None."""
        self._require_ready()
        product = self.get_product(product_id)
        if product is None:
            return None

        self._products = [p for p in self._products if p.id != product_id]
        logger.info(f"Product deleted: {product.name} ({product.id})")

        self._notifications.add_notification(messages.product_deleted(product.name))
        self._persist()
        return product

    def update_stock(self, product_id: str, new_quantity, reason: str = "") -> Product:
        """
        Set the quantity of a product (clamped to >= 0) and report the change.

        Raises ProductNotFoundError or ProductValidationError without changing state.
        """
        self._require_ready()
        index = self._index_of(product_id)
        current = self._products[index]
        try:
            quantity = coerce_count(new_quantity)
        except ValueError as e:
            raise ProductValidationError([f"quantity: {e}"]) from e

        updated = current.model_copy(update={"quantity": quantity, "updated_at": self._clock()})
        self._products[index] = updated
        logger.info(
            f"Stock changed for {updated.name}: {current.quantity} -> {quantity}"
            + (f" ({reason})" if reason else "")
        )

        self._notifications.add_notification(
            messages.stock_updated(updated.name, current.quantity, quantity, reason)
        )
        self._persist()
        return updated

    def import_products(self, rows: Iterable[dict], first_row_number: int = 1) -> ImportResult:
        """
        Add each row as a product. A rejected row is reported in the result and
        does not stop the rest of the batch.
        """
        self._require_ready()
        imported = 0
        errors: list[str] = []
        total_rows = 0

        for row_num, row in enumerate(rows, start=first_row_number):
            total_rows += 1
            try:
                self.add_product(row)
                imported += 1
            except ProductValidationError as e:
                errors.append(f"الصف {row_num}: {', '.join(e.errors)}")

        if total_rows:
            self._notifications.add_notification(messages.import_summary(imported, len(errors)))
        logger.info(f"Imported {imported}/{total_rows} products ({len(errors)} rejected)")
        return ImportResult(imported=imported, errors=errors, total_rows=total_rows)

    # ------------------------------------------------------------------
    # Settings mutations
    # ------------------------------------------------------------------

    def update_settings(self, new_settings: StoreSettings | dict) -> StoreSettings:
        """Replace the settings wholesale. A dict is validated first (pydantic ValidationError)."""
        self._require_ready()
        if isinstance(new_settings, dict):
            new_settings = StoreSettings.model_validate(new_settings)
        self._settings = new_settings.model_copy(deep=True)
        logger.info("Settings updated")

        self._persist()
        self.settings_changed.send(self.settings)
        return self.settings

    def reset_settings(self) -> StoreSettings:
        self._require_ready()
        self._settings = StoreSettings()
        logger.info("Settings reset to defaults")

        self._persist()
        self.settings_changed.send(self.settings)
        return self.settings

    def update_color_scheme(self, colors: dict[str, str]) -> StoreSettings:
        """Merge colour overrides into the current palette."""
        self._require_ready()
        settings = self.settings
        settings.colors.update(colors)
        self._settings = settings

        self._persist()
        self.settings_changed.send(self.settings)
        return self.settings

    def set_language(self, language: str) -> str:
        self._require_ready()
        self._language = language
        self._persist()
        return self._language

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _as_dict(data: dict | BaseModel) -> dict:
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_unset=True)
        return dict(data)

    @staticmethod
    def _validated_fields(data: dict) -> dict:
        try:
            product = ProductCreate.model_validate(data)
        except ValidationError as e:
            raise ProductValidationError.from_pydantic(e) from e
        return product.model_dump()

    def _index_of(self, product_id: str) -> int:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        raise ProductNotFoundError(product_id)

    def _persist(self) -> None:
        try:
            self._storage.save(self.snapshot())
        except PersistenceError as e:
            self._report_persistence_failure(e)
        else:
            self.last_persistence_error = None
            self._load_failed = False

    def _report_persistence_failure(self, error: PersistenceError) -> None:
        logger.error(f"Persistence failed, in-memory state kept: {error}")
        self.last_persistence_error = error
        self.persistence_failed.send(error)
