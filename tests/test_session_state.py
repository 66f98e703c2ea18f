from decimal import Decimal

import pytest

from restaurant_errors import DataNotLoaded, InsufficientStock, InvalidQuantity, ItemNotFound, LoadError
from restaurant_state import SessionState
from tests.conftest import INFO_TEXT


def test_new_state_is_not_ready(state: SessionState) -> None:
    assert not state.is_ready()
    assert state.is_empty()
    assert state.catalog == {}
    assert state.schedule == {}


def test_load_builds_typed_catalog_and_schedule(loaded_state: SessionState) -> None:
    assert loaded_state.is_ready()
    assert loaded_state.restaurant_info_text == INFO_TEXT
    assert [item.name for item in loaded_state.list_items()] == ["Burger", "Fries", "Lemonade"]
    assert loaded_state.find_item("burger").unit_price == Decimal("5.00")
    assert set(loaded_state.schedule) == {"monday", "tuesday", "wednesday"}
    assert loaded_state.schedule["monday"].is_closed


def test_reload_with_same_input_is_idempotent_and_keeps_cart(loaded_state, catalog_rows, schedule_rows) -> None:
    loaded_state.add_line("Burger", 3)
    catalog_before = {k: v.model_dump() for k, v in loaded_state.catalog.items()}
    schedule_before = dict(loaded_state.schedule)

    loaded_state.load(catalog_rows, schedule_rows, INFO_TEXT)

    assert {k: v.model_dump() for k, v in loaded_state.catalog.items()} == catalog_before
    assert loaded_state.schedule == schedule_before
    lines, total = loaded_state.view()
    assert [(line.item_name, line.quantity) for line in lines] == [("Burger", 3)]
    assert total == Decimal("15.00")


@pytest.mark.parametrize(
    "bad_catalog,bad_schedule",
    (
        ([{"item_name": "Burger", "price": "abc", "available_quantity": "1"}], None),
        ([{"item_name": "Burger", "price": "1.00"}], None),
        (None, [{"DayOfWeek": "Tuesday", "OpenTime": "25:00", "CloseTime": "21:00"}]),
        (None, [{"OpenTime": "09:00", "CloseTime": "21:00"}]),
    ),
)
def test_failed_load_leaves_previous_state_untouched(loaded_state, catalog_rows, schedule_rows, bad_catalog, bad_schedule) -> None:
    loaded_state.add_line("Fries", 1)
    catalog_before = {k: v.model_dump() for k, v in loaded_state.catalog.items()}

    with pytest.raises(LoadError):
        loaded_state.load(bad_catalog or catalog_rows, bad_schedule or schedule_rows, "new info")

    assert loaded_state.is_ready()
    assert {k: v.model_dump() for k, v in loaded_state.catalog.items()} == catalog_before
    assert set(loaded_state.schedule) == {"monday", "tuesday", "wednesday"}
    assert loaded_state.restaurant_info_text == INFO_TEXT
    assert loaded_state.find_line("Fries").quantity == 1


def test_failed_first_load_keeps_state_unloaded(state, schedule_rows) -> None:
    with pytest.raises(LoadError) as exc_info:
        state.load([{"item_name": "Burger", "price": "5", "available_quantity": "x"}], schedule_rows, "info")
    assert exc_info.value.source == "catalog"
    assert exc_info.value.row == 1
    assert "available_quantity" in exc_info.value.message
    assert not state.is_ready()
    assert state.catalog == {}


def test_load_rejects_duplicate_items_case_insensitively(state, schedule_rows) -> None:
    rows = [
        {"item_name": "Burger", "price": "5", "available_quantity": "1"},
        {"item_name": "BURGER", "price": "6", "available_quantity": "1"},
    ]
    with pytest.raises(LoadError) as exc_info:
        state.load(rows, schedule_rows, "")
    assert exc_info.value.row == 2


def test_load_rejects_duplicate_days(state, catalog_rows) -> None:
    rows = [
        {"DayOfWeek": "Tuesday", "OpenTime": "09:00", "CloseTime": "21:00"},
        {"DayOfWeek": "tuesday", "OpenTime": "10:00", "CloseTime": "20:00"},
    ]
    with pytest.raises(LoadError):
        state.load(catalog_rows, rows, "")


def test_find_item_is_exact_and_case_insensitive(loaded_state) -> None:
    assert loaded_state.find_item("  LEMONADE ").name == "Lemonade"
    assert loaded_state.find_item("Lemon") is None
    assert loaded_state.find_item("Burgers") is None


def test_add_line_requires_loaded_data(state) -> None:
    with pytest.raises(DataNotLoaded):
        state.add_line("Burger", 1)


@pytest.mark.parametrize("quantity", (0, -1, 1.5, "2", True, None))
def test_add_line_rejects_non_positive_integer_quantity(loaded_state, quantity) -> None:
    with pytest.raises(InvalidQuantity):
        loaded_state.add_line("Burger", quantity)
    assert loaded_state.is_empty()


def test_add_line_unknown_item(loaded_state) -> None:
    with pytest.raises(ItemNotFound) as exc_info:
        loaded_state.add_line("Pizza", 1)
    assert exc_info.value.item_name == "Pizza"
    assert loaded_state.is_empty()


def test_add_line_insufficient_stock_reports_available(loaded_state) -> None:
    with pytest.raises(InsufficientStock) as exc_info:
        loaded_state.add_line("Fries", 5)
    assert exc_info.value.available == 2
    assert "Only 2 are available" in exc_info.value.message
    assert loaded_state.is_empty()
    assert loaded_state.find_item("Fries").available_quantity == 2


def test_add_line_does_not_reserve_stock(loaded_state) -> None:
    loaded_state.add_line("Fries", 2)
    loaded_state.add_line("Fries", 2)
    assert loaded_state.find_line("fries").quantity == 4
    assert loaded_state.find_item("Fries").available_quantity == 2


def test_repeated_add_merges_and_keeps_first_price(loaded_state) -> None:
    loaded_state.add_line("Burger", 1)
    loaded_state.find_item("Burger").unit_price = Decimal("7.00")
    loaded_state.add_line("burger", 2)

    lines, total = loaded_state.view()
    assert len(lines) == 1
    assert lines[0].item_name == "Burger"
    assert lines[0].quantity == 3
    assert lines[0].unit_price_snapshot == Decimal("5.00")
    assert total == Decimal("15.00")


def test_view_total_uses_exact_decimal_arithmetic(loaded_state) -> None:
    for _ in range(3):
        loaded_state.add_line("Lemonade", 1)
    _, total = loaded_state.view()
    assert total == Decimal("9.99")
    assert str(total) == "9.99"


def test_cart_keeps_insertion_order(loaded_state) -> None:
    loaded_state.add_line("Lemonade", 1)
    loaded_state.add_line("Burger", 1)
    loaded_state.add_line("Lemonade", 1)
    assert [line.item_name for line in loaded_state.cart] == ["Lemonade", "Burger"]


def test_decrement_stock(loaded_state) -> None:
    loaded_state.decrement_stock("burger", 4)
    assert loaded_state.find_item("Burger").available_quantity == 6
