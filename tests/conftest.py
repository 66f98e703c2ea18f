from typing import Dict, List

import pytest

from order_log import OrderLog
from restaurant_loader import RestaurantData
from restaurant_state import SessionState
from restaurant_tools import RestaurantTools

# 2024-06-03 is a Monday
MONDAY = "2024-06-03"
TUESDAY = "2024-06-04"
WEDNESDAY = "2024-06-05"
SUNDAY = "2024-06-09"

INFO_TEXT = "Burger Barn opened in 1999. We deliver within 5 km."


def make_catalog_rows() -> List[Dict[str, str]]:
    return [
        {"item_name": "Burger", "price": "5.00", "available_quantity": "10"},
        {"item_name": "Fries", "price": "2.50", "available_quantity": "2"},
        {"item_name": "Lemonade", "price": "3.33", "available_quantity": "40"},
    ]


def make_schedule_rows() -> List[Dict[str, str]]:
    return [
        {"DayOfWeek": "Monday", "OpenTime": "closed", "CloseTime": "closed"},
        {"DayOfWeek": "Tuesday", "OpenTime": "09:00", "CloseTime": "21:00"},
        {"DayOfWeek": "wednesday", "OpenTime": "09:00", "CloseTime": "17:00"},
    ]


class StaticSource:
    def __init__(self, catalog_rows=None, schedule_rows=None, info_text: str = INFO_TEXT) -> None:
        self.catalog_rows = make_catalog_rows() if catalog_rows is None else catalog_rows
        self.schedule_rows = make_schedule_rows() if schedule_rows is None else schedule_rows
        self.info_text = info_text
        self.reads = 0

    def read(self) -> RestaurantData:
        self.reads += 1
        return RestaurantData(
            catalog_rows=[dict(r) for r in self.catalog_rows],
            schedule_rows=[dict(r) for r in self.schedule_rows],
            info_text=self.info_text,
        )


class FakeAnswerGenerator:
    def __init__(self, answer: str = "We opened in 1999.", error: Exception = None) -> None:
        self.answer = answer
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def catalog_rows() -> List[Dict[str, str]]:
    return make_catalog_rows()


@pytest.fixture
def schedule_rows() -> List[Dict[str, str]]:
    return make_schedule_rows()


@pytest.fixture
def state() -> SessionState:
    return SessionState()


@pytest.fixture
def loaded_state(catalog_rows, schedule_rows) -> SessionState:
    s = SessionState()
    s.load(catalog_rows, schedule_rows, INFO_TEXT)
    return s


@pytest.fixture
def source() -> StaticSource:
    return StaticSource()


@pytest.fixture
def answer_generator() -> FakeAnswerGenerator:
    return FakeAnswerGenerator()


@pytest.fixture
def order_log(tmp_path) -> OrderLog:
    return OrderLog(tmp_path / "orders.jsonl")


@pytest.fixture
def tools(state, source, answer_generator, order_log) -> RestaurantTools:
    return RestaurantTools(state=state, source=source, answer_generator=answer_generator, order_log=order_log)
