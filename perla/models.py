# perla/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List

CATEGORIES = ("Electrónica", "Ropa", "Alimentos", "Otros")
LOW_STOCK_THRESHOLD = 5


class InventoryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    name: str
    category: str
    quantity: int
    date_added: str = Field(alias="dateAdded")

    @property
    def is_low_stock(self) -> bool:
        return self.quantity < LOW_STOCK_THRESHOLD

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class InventoryDocument(BaseModel):
    # a document without the field is an empty collection
    inventory: List[InventoryItem] = Field(default_factory=list)

    def to_wire(self) -> dict:
        return {"inventory": [item.to_wire() for item in self.inventory]}
