"""
Error kinds raised by the session state engine.

Every error carries a ``kind`` tag and a user-facing message. The tool layer
renders them as ``Error: <message>`` text; nothing here is fatal.
"""
from typing import Optional

DATA_NOT_LOADED_MESSAGE = "Data is not loaded. Please run the 'loadRestaurantData' tool first."


class RestaurantError(Exception):
    kind = "restaurant_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DataNotLoaded(RestaurantError):
    kind = "data_not_loaded"

    def __init__(self) -> None:
        super().__init__(DATA_NOT_LOADED_MESSAGE)


class LoadError(RestaurantError):
    kind = "load_error"

    def __init__(self, details: str, *, source: str = "", row: Optional[int] = None) -> None:
        self.details = details
        self.source = source
        self.row = row
        where = source
        if row is not None:
            where = f"{source} row {row}" if source else f"row {row}"
        text = f"{where}: {details}" if where else details
        super().__init__(f"Failed to load restaurant data. Details: {text}")


class ItemNotFound(RestaurantError):
    kind = "item_not_found"

    def __init__(self, item_name: str) -> None:
        self.item_name = item_name
        super().__init__(f'Item "{item_name}" was not found on the menu.')


class InsufficientStock(RestaurantError):
    kind = "insufficient_stock"

    def __init__(self, item_name: str, available: int) -> None:
        self.item_name = item_name
        self.available = available
        super().__init__(f'Not enough stock for "{item_name}". Only {available} are available.')


class InvalidQuantity(RestaurantError):
    kind = "invalid_quantity"

    def __init__(self, quantity: object) -> None:
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive whole number (got {quantity!r}).")


class EmptyCart(RestaurantError):
    kind = "empty_cart"

    def __init__(self) -> None:
        super().__init__("Cannot place an order with an empty cart.")


class InvalidDate(RestaurantError):
    kind = "invalid_date"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__("Invalid date format. Please use YYYY-MM-DD.")


class InvalidTime(RestaurantError):
    kind = "invalid_time"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__("Invalid time format. Please use HH:MM (24-hour).")


class ClosedOnDay(RestaurantError):
    kind = "closed_on_day"

    def __init__(self, day_name: str) -> None:
        self.day_name = day_name
        super().__init__(f"Sorry, we are closed on {day_name}s.")


class OutsideHours(RestaurantError):
    kind = "outside_hours"

    def __init__(self, day_name: str, open_time: str, close_time: str) -> None:
        self.day_name = day_name
        self.open_time = open_time
        self.close_time = close_time
        super().__init__(f"Sorry, on {day_name}s our hours are from {open_time} to {close_time}.")


class StockChanged(RestaurantError):
    kind = "stock_changed"

    def __init__(self, item_name: str, available_now: int) -> None:
        self.item_name = item_name
        self.available_now = available_now
        super().__init__(
            f'Stock for "{item_name}" changed since it was added to your cart. '
            f"Only {available_now} are available now, so the order was not placed."
        )

