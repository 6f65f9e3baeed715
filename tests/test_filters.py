from perla.filters import filter_items
from perla.models import InventoryItem


def _items():
    return [
        InventoryItem(id=2, name="Mouse", category="Electrónica", quantity=3, dateAdded="2/1/2025"),
        InventoryItem(id=1, name="Desk", category="Otros", quantity=12, dateAdded="1/1/2025"),
    ]


def test_empty_query_returns_everything_in_order():
    items = _items()
    assert filter_items(items, "") == items


def test_matches_quantity_text():
    assert [i.name for i in filter_items(_items(), "12")] == ["Desk"]


def test_matches_category_ignoring_case():
    assert [i.name for i in filter_items(_items(), "ELEC")] == ["Mouse"]


def test_matches_name_substring():
    assert [i.name for i in filter_items(_items(), "es")] == ["Desk"]


def test_no_match():
    assert filter_items(_items(), "zzz") == []


def test_input_not_mutated():
    items = _items()
    filter_items(items, "mouse")
    assert len(items) == 2
