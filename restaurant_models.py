"""
Typed entities for the restaurant session: catalog items, day schedules,
cart lines and placed orders.

Loose rows from the data sources are validated into these models at the load
boundary; nothing downstream ever sees an untyped row.
"""
import re
from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DayName = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
DAYS_OF_WEEK: List[str] = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
CLOSED = "closed"

_HHMM = re.compile(r"^(\d{2}):(\d{2})$")


def parse_hhmm(value: str) -> int:
    """
    Convert a zero-padded 24-hour "HH:MM" string to minutes since midnight.

    Raises:
        ValueError: if the value is not a well-formed time of day.
    """
    match = _HHMM.match(str(value or "").strip())
    if not match:
        raise ValueError(f"'{value}' is not a HH:MM time")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"'{value}' is not a valid time of day")
    return hours * 60 + minutes


def normalize_name(name: str) -> str:
    return str(name or "").strip().lower()


def format_price(value: Decimal) -> str:
    return f"${value:.2f}"


class CatalogItem(BaseModel):
    """A sellable menu item. Field aliases match the catalog CSV headers."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(alias="item_name", min_length=1)
    unit_price: Decimal = Field(alias="price", ge=0)
    available_quantity: int = Field(ge=0)

    @property
    def key(self) -> str:
        return normalize_name(self.name)


class DaySchedule(BaseModel):
    """Opening window for one day of the week. Field aliases match the schedule CSV headers."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    day_of_week: DayName = Field(alias="DayOfWeek")
    open_time: str = Field(alias="OpenTime")
    close_time: str = Field(default="", alias="CloseTime")

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day(cls, value):
        return str(value or "").strip().lower()

    @field_validator("open_time")
    @classmethod
    def validate_open_time(cls, value):
        if value.lower() == CLOSED:
            return CLOSED
        parse_hhmm(value)
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "DaySchedule":
        if self.is_closed:
            return self
        if parse_hhmm(self.close_time) < parse_hhmm(self.open_time):
            raise ValueError(f"close time {self.close_time} is before open time {self.open_time}")
        return self

    @property
    def is_closed(self) -> bool:
        return self.open_time == CLOSED

    @property
    def open_minutes(self) -> int:
        return parse_hhmm(self.open_time)

    @property
    def close_minutes(self) -> int:
        return parse_hhmm(self.close_time)


class CartLine(BaseModel):
    item_name: str
    quantity: int = Field(gt=0)
    unit_price_snapshot: Decimal = Field(ge=0)

    @property
    def key(self) -> str:
        return normalize_name(self.item_name)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price_snapshot * self.quantity


class Order(BaseModel):
    """Confirmation record of a placed order, handed to the order log."""
    order_id: str
    lines: List[CartLine]
    total_price: Decimal
    delivery_date: date
    delivery_time: str
    placed_at: datetime = Field(default_factory=datetime.now)
