"""
Session state for one restaurant ordering conversation.

A SessionState owns the catalog, the weekly schedule, the restaurant info text
and the cart. It is constructed explicitly and handed to whatever needs it;
there is no module-level instance.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError

from logger_config import get_logger
from restaurant_errors import DataNotLoaded, InsufficientStock, InvalidQuantity, ItemNotFound, LoadError
from restaurant_models import CartLine, CatalogItem, DaySchedule, normalize_name

logger = get_logger()

Row = Mapping[str, Any]


def _describe_validation_error(error: ValidationError) -> str:
    parts: List[str] = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc") or ())
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _validate_rows(model: type, rows: Iterable[Row], source: str) -> List[Any]:
    validated: List[BaseModel] = []
    for index, row in enumerate(rows, 1):
        try:
            validated.append(model.model_validate(dict(row)))
        except ValidationError as e:
            raise LoadError(_describe_validation_error(e), source=source, row=index) from e
    return validated


def build_catalog(rows: Iterable[Row]) -> Dict[str, CatalogItem]:
    catalog: Dict[str, CatalogItem] = {}
    for index, item in enumerate(_validate_rows(CatalogItem, rows, "catalog"), 1):
        if item.key in catalog:
            raise LoadError(f"duplicate item '{item.name}'", source="catalog", row=index)
        catalog[item.key] = item
    return catalog


def build_schedule(rows: Iterable[Row]) -> Dict[str, DaySchedule]:
    schedule: Dict[str, DaySchedule] = {}
    for index, day in enumerate(_validate_rows(DaySchedule, rows, "schedule"), 1):
        if day.day_of_week in schedule:
            raise LoadError(f"duplicate day '{day.day_of_week}'", source="schedule", row=index)
        schedule[day.day_of_week] = day
    return schedule


class SessionState:
    def __init__(self) -> None:
        self.is_data_loaded = False
        self.restaurant_info_text = ""
        self.catalog: Dict[str, CatalogItem] = {}
        self.schedule: Dict[str, DaySchedule] = {}
        self.cart: List[CartLine] = []

    # ---------------------------- loading ---------------------------- #
    def load(self, catalog_rows: Iterable[Row], schedule_rows: Iterable[Row], info_text: str) -> None:
        """
        Replace catalog, schedule and info text in one step.

        Every row is validated before anything is assigned, so a bad row in
        either source leaves the previous data (and the loaded flag) as it was.
        The cart is never touched, even on reload.

        Raises:
            LoadError: if any row is structurally invalid.
        """
        catalog = build_catalog(catalog_rows)
        schedule = build_schedule(schedule_rows)
        self.catalog = catalog
        self.schedule = schedule
        self.restaurant_info_text = str(info_text or "")
        self.is_data_loaded = True
        logger.info(f"Session loaded: {len(catalog)} catalog items, {len(schedule)} schedule days, info_text={len(self.restaurant_info_text)} chars")

    def is_ready(self) -> bool:
        return self.is_data_loaded

    def require_ready(self) -> None:
        if not self.is_data_loaded:
            raise DataNotLoaded()

    # ---------------------------- catalog ---------------------------- #
    def find_item(self, name: str) -> Optional[CatalogItem]:
        """Case-insensitive exact lookup; partial names do not match."""
        return self.catalog.get(normalize_name(name))

    def list_items(self) -> List[CatalogItem]:
        return list(self.catalog.values())

    def decrement_stock(self, name: str, quantity: int) -> None:
        # Caller guarantees available_quantity >= quantity.
        item = self.catalog[normalize_name(name)]
        item.available_quantity -= quantity

    # ---------------------------- cart ---------------------------- #
    def add_line(self, name: str, quantity: Any) -> CartLine:
        """
        Add ``quantity`` of a catalog item to the cart.

        Stock is checked against the catalog as it is now, without subtracting
        what is already in the cart: nothing is reserved until the order is
        placed. A repeated item merges into its existing line and keeps the
        price captured the first time it was added.
        """
        self.require_ready()
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(quantity)
        item = self.find_item(name)
        if item is None:
            raise ItemNotFound(name)
        if item.available_quantity < quantity:
            raise InsufficientStock(item.name, item.available_quantity)

        line = self.find_line(item.name)
        if line is not None:
            line.quantity += quantity
        else:
            line = CartLine(item_name=item.name, quantity=quantity, unit_price_snapshot=item.unit_price)
            self.cart.append(line)
        logger.info(f"Cart add: {quantity} x {item.name} (line quantity now {line.quantity})")
        return line

    def find_line(self, name: str) -> Optional[CartLine]:
        key = normalize_name(name)
        for line in self.cart:
            if line.key == key:
                return line
        return None

    def view(self) -> Tuple[List[CartLine], Decimal]:
        lines = list(self.cart)
        return lines, sum((line.line_total for line in lines), Decimal("0"))

    def is_empty(self) -> bool:
        return not self.cart

    def clear_cart(self) -> None:
        self.cart = []
