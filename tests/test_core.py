from datetime import datetime

from perla.core import format_date, make_item_id, normalize_category, parse_item_input
from perla.models import InventoryItem


def test_parse_strips_and_converts():
    payload, errors = parse_item_input("  Laptop Gamer ", " Electrónica ", " 15 ")
    assert errors is None
    assert payload.name == "Laptop Gamer"
    assert payload.category == "Electrónica"
    assert payload.quantity == 15


def test_parse_accepts_zero():
    payload, errors = parse_item_input("Desk", "Otros", "0")
    assert errors is None
    assert payload.quantity == 0


def test_parse_rejects_bad_quantities():
    for text in ("-1", "abc", "", "3.5"):
        payload, errors = parse_item_input("Desk", "Otros", text)
        assert payload is None
        assert any(e.startswith("quantity") for e in errors)


def test_parse_reports_each_missing_field():
    _, errors = parse_item_input("", "", "1")
    assert len(errors) == 2


def test_date_is_unpadded_day_month_year():
    assert format_date(datetime(2025, 3, 5)) == "5/3/2025"
    assert format_date(datetime(2024, 12, 25)) == "25/12/2024"


def test_item_id_is_millisecond_timestamp():
    moment = datetime(2025, 3, 5, 10, 0, 0)
    assert make_item_id(moment) == int(moment.timestamp() * 1000)


def test_item_wire_shape_uses_date_added_alias():
    item = InventoryItem(id=1, name="Desk", category="Otros", quantity=4, dateAdded="1/1/2025")
    assert item.to_wire() == {
        "id": 1, "name": "Desk", "category": "Otros", "quantity": 4, "dateAdded": "1/1/2025",
    }
    assert item.is_low_stock


def test_category_must_come_from_entry_set():
    payload, errors = parse_item_input("Desk", "Foo", "1")
    assert payload is None
    assert any(e.startswith("category") for e in errors)


def test_normalize_category_ignores_case_and_spaces():
    assert normalize_category(" ropa ") == "Ropa"
    assert normalize_category("ELECTRÓNICA") == "Electrónica"
    assert normalize_category("Foo") is None


def test_loaded_items_keep_free_text_category():
    item = InventoryItem(id=1, name="Desk", category="Muebles", quantity=4, dateAdded="1/1/2025")
    assert item.category == "Muebles"
