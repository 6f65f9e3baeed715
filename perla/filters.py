from typing import Iterable, List

from .models import InventoryItem


def filter_items(items: Iterable[InventoryItem], query: str) -> List[InventoryItem]:
    """Items whose name, category or quantity contains ``query``, ignoring case."""
    term = (query or "").lower()
    out = []
    for item in items:
        if (
            term in item.name.lower()
            or term in item.category.lower()
            or term in str(item.quantity)
        ):
            out.append(item)
    return out
