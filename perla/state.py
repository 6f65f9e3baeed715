# perla/state.py
import asyncio
import contextlib
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .core import MutationResult, MutationStatus, _make_item, parse_item_input
from .filters import filter_items
from .models import InventoryItem
from .storeclient import DocumentStoreClient, LoadResult

logger = logging.getLogger(__name__)


class InventoryState:
    """Authoritative in-memory inventory plus the mock session flag.

    Every mutation is optimistic: the list changes first, then the whole
    collection is sent to the store, and the change is undone if the store
    does not acknowledge it.
    """

    def __init__(
        self,
        store: DocumentStoreClient,
        clock: Optional[Callable[[], datetime]] = None,
        serialize_mutations: bool = True,
    ):
        self.store = store
        self.clock = clock or datetime.now
        self.is_logged_in = False
        self.initialized = False
        self._items: List[InventoryItem] = []
        self._lock = asyncio.Lock() if serialize_mutations else None

    @property
    def items(self) -> Tuple[InventoryItem, ...]:
        return tuple(self._items)

    def _mutation(self):
        if self._lock is None:
            return contextlib.nullcontext()
        return self._lock

    async def initialize(self) -> LoadResult:
        self.is_logged_in = False
        result = await self.store.load_all()
        self._items = list(result.items)
        self.initialized = True
        logger.info("Loaded %d items", len(self._items))
        return result

    def toggle_session(self) -> bool:
        self.is_logged_in = not self.is_logged_in
        return self.is_logged_in

    def _accepts_mutations(self) -> bool:
        return self.initialized and self.is_logged_in

    async def add_item(self, name: str, category: str, quantity_text: str) -> MutationResult:
        if not self._accepts_mutations():
            return MutationResult(MutationStatus.SKIPPED)

        payload, errors = parse_item_input(name, category, quantity_text)
        if errors:
            return MutationResult(MutationStatus.VALIDATION_ERROR, errors=errors)

        async with self._mutation():
            item = _make_item(payload, self.clock())
            self._items.insert(0, item)

            if await self.store.save_all(list(self._items)):
                logger.debug("Committed add of item %s", item.id)
                return MutationResult(MutationStatus.OK, item=item)

            # undo exactly this insert, wherever it sits now
            self._items = [i for i in self._items if i is not item]
            logger.warning("Rolled back add of item %s", item.id)
            return MutationResult(
                MutationStatus.PERSISTENCE_ERROR,
                item=item,
                errors=["Error al guardar el artículo"],
            )

    async def remove_item(self, item_id: int) -> MutationResult:
        if not self._accepts_mutations():
            return MutationResult(MutationStatus.SKIPPED)

        async with self._mutation():
            before = list(self._items)
            removed = [(pos, i) for pos, i in enumerate(before) if i.id == item_id]
            self._items = [i for i in before if i.id != item_id]
            item = removed[0][1] if removed else None

            if await self.store.save_all(list(self._items)):
                logger.debug("Committed removal of item %s", item_id)
                return MutationResult(MutationStatus.OK, item=item)

            for pos, old in removed:
                self._reinsert(old, pos, before)
            logger.warning("Rolled back removal of item %s", item_id)
            return MutationResult(
                MutationStatus.PERSISTENCE_ERROR,
                item=item,
                errors=["Error al eliminar el artículo"],
            )

    def _reinsert(self, item: InventoryItem, pos: int, before: List[InventoryItem]):
        # in front of the first former follower still present, else the old index
        for follower in before[pos + 1:]:
            if follower.id == item.id:
                continue
            for idx, current in enumerate(self._items):
                if current is follower:
                    self._items.insert(idx, item)
                    return
        self._items.insert(min(pos, len(self._items)), item)

    def filtered(self, query: str) -> List[InventoryItem]:
        return filter_items(self._items, query)
