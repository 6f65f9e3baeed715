# perla/storeclient.py
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import httpx
from pydantic import ValidationError

from .config import settings
from .models import InventoryDocument, InventoryItem

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    items: List[InventoryItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def unavailable(self) -> bool:
        return self.error is not None


class DocumentStoreClient:
    """Reads and replaces the whole inventory document on the store.

    Both operations swallow every failure: ``load_all`` degrades to an empty
    collection and ``save_all`` to ``False``. Callers never see an exception
    from the network.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        path: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.store_url).rstrip("/")
        self.path = path or settings.store_path
        if not self.path.startswith("/"):
            self.path = "/" + self.path
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.timeout
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    async def load_all(self) -> LoadResult:
        try:
            r = await self.client.get(self.url)
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            return self._unavailable(f"{type(e).__name__}: {e}")

        if not isinstance(data, dict):
            return self._unavailable("document is not a JSON object")
        if data.get("inventory") is None:
            return LoadResult()
        try:
            doc = InventoryDocument.model_validate(data)
        except ValidationError as e:
            return self._unavailable(f"malformed document ({e.error_count()} errors)")
        return LoadResult(items=list(doc.inventory))

    async def save_all(self, items: Iterable[InventoryItem]) -> bool:
        payload = {"inventory": [item.to_wire() for item in items]}
        try:
            r = await self.client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Error saving data to %s: %s", self.url, e)
            return False
        if not r.is_success:
            logger.warning("Store rejected save with HTTP %s", r.status_code)
            return False
        return True

    def _unavailable(self, reason: str) -> LoadResult:
        logger.warning("Store unavailable at %s: %s", self.url, reason)
        return LoadResult(error=reason)

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
