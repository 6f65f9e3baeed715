import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import CATEGORIES, InventoryItem

_INT_TEXT = re.compile(r"[+-]?\d+")


class ItemIn(BaseModel):
    """Raw values from the add-item form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    quantity: int = Field(ge=0)

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value):
        if isinstance(value, bool):
            raise ValueError("quantity must be a whole number")
        if isinstance(value, int):
            return value
        text = str(value).strip()
        if not _INT_TEXT.fullmatch(text):
            raise ValueError("quantity must be a whole number")
        return int(text)

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        canonical = normalize_category(value)
        if canonical is None:
            raise ValueError("category must be one of " + ", ".join(CATEGORIES))
        return canonical


def normalize_category(text: str) -> Optional[str]:
    """Canonical spelling of an entry category, or None if it is not one."""
    key = (text or "").strip().lower()
    for category in CATEGORIES:
        if category.lower() == key:
            return category
    return None


class MutationStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    VALIDATION_ERROR = "validation_error"
    PERSISTENCE_ERROR = "persistence_error"


@dataclass
class MutationResult:
    status: MutationStatus
    item: Optional[InventoryItem] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is MutationStatus.OK


def parse_item_input(name: str, category: str, quantity_text: str):
    """Returns (ItemIn, None) on success, (None, [messages]) otherwise."""
    try:
        return ItemIn(name=name, category=category, quantity=quantity_text), None
    except ValidationError as e:
        messages = []
        for err in e.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()))
            messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return None, messages


def format_date(moment: datetime) -> str:
    # es-DO short date, e.g. 5/3/2025
    return f"{moment.day}/{moment.month}/{moment.year}"


def make_item_id(moment: datetime) -> int:
    # millisecond timestamp; two items created in the same millisecond collide
    return int(moment.timestamp() * 1000)


def _make_item(payload: ItemIn, moment: datetime) -> InventoryItem:
    return InventoryItem(
        id=make_item_id(moment),
        name=payload.name,
        category=payload.category,
        quantity=payload.quantity,
        date_added=format_date(moment),
    )
