"""
Order validation and placement.

validate_order() is pure: it reads the session and raises the first rejection
that applies. place_order() wraps it, re-checks stock line by line and only
then mutates the catalog and the cart, all or nothing.
"""
import re
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional

from logger_config import get_logger
from restaurant_errors import (
    ClosedOnDay,
    EmptyCart,
    InvalidDate,
    InvalidTime,
    OutsideHours,
    StockChanged,
)
from restaurant_models import DAYS_OF_WEEK, CartLine, Order, parse_hhmm
from restaurant_state import SessionState

logger = get_logger()


@dataclass(frozen=True)
class AcceptedOrder:
    delivery_date: date
    delivery_time: str
    day_name: str


_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_delivery_date(value: str) -> date:
    text = str(value or "").strip()
    # strptime alone would accept "2024-6-4"
    if not _ISO_DATE.fullmatch(text):
        raise InvalidDate(value)
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDate(value) from e


def day_name_of(day: date) -> str:
    # weekday() is locale independent, unlike strftime("%A")
    return DAYS_OF_WEEK[day.weekday()]


def validate_order(state: SessionState, delivery_date: str, delivery_time: str) -> AcceptedOrder:
    """
    Decide whether the current cart may be delivered at the given date and time.

    Checks run in a fixed order and the first failure is raised: data loaded,
    cart not empty, valid calendar date, restaurant open that weekday, time
    inside the opening window (both bounds inclusive). Nothing is mutated.
    """
    state.require_ready()
    if state.is_empty():
        raise EmptyCart()

    target = parse_delivery_date(delivery_date)
    day_name = day_name_of(target)
    day = state.schedule.get(day_name)
    if day is None or day.is_closed:
        raise ClosedOnDay(day_name)

    time_text = str(delivery_time or "").strip()
    try:
        minutes = parse_hhmm(time_text)
    except ValueError as e:
        raise InvalidTime(delivery_time) from e
    if minutes < day.open_minutes or minutes > day.close_minutes:
        raise OutsideHours(day_name, day.open_time, day.close_time)

    return AcceptedOrder(delivery_date=target, delivery_time=time_text, day_name=day_name)


class OrderIdGenerator:
    """ORD-<nanosecond timestamp>, bumped when the clock has not moved on."""

    def __init__(self) -> None:
        self._last = 0

    def next_id(self) -> str:
        stamp = max(time.time_ns(), self._last + 1)
        self._last = stamp
        return f"ORD-{stamp}"


def _find_stock_shortfall(state: SessionState) -> Optional[StockChanged]:
    for line in state.cart:
        item = state.find_item(line.item_name)
        available = item.available_quantity if item is not None else 0
        if available < line.quantity:
            return StockChanged(line.item_name, available)
    return None


def place_order(
    state: SessionState,
    delivery_date: str,
    delivery_time: str,
    id_generator: OrderIdGenerator,
) -> Order:
    """
    Validate and commit the cart as an order.

    Stock was only checked when items were added, so it may have shrunk since
    (for example after a reload). Every line is re-checked before any
    decrement; one short line rejects the whole order and leaves cart and
    catalog exactly as they were.
    """
    accepted = validate_order(state, delivery_date, delivery_time)

    shortfall = _find_stock_shortfall(state)
    if shortfall is not None:
        raise shortfall

    lines: List[CartLine] = [line.model_copy() for line in state.cart]
    _, total = state.view()
    for line in lines:
        state.decrement_stock(line.item_name, line.quantity)
    state.clear_cart()

    order = Order(
        order_id=id_generator.next_id(),
        lines=lines,
        total_price=total,
        delivery_date=accepted.delivery_date,
        delivery_time=accepted.delivery_time,
    )
    remaining: Dict[str, int] = {}
    for line in lines:
        item = state.find_item(line.item_name)
        remaining[item.name] = item.available_quantity
    logger.info(f"Order {order.order_id} placed for {accepted.day_name} {order.delivery_date} {order.delivery_time}, total={order.total_price}, remaining stock={remaining}")
    return order
