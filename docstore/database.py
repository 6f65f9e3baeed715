import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from perla.config import settings

# This file holds the single inventory document and its write lock.

logger = logging.getLogger(__name__)

DOCUMENT: Dict[str, Any] = {"inventory": []}
_LOCK = asyncio.Lock()
_loaded = False


def _data_file() -> Optional[Path]:
    return Path(settings.data_file) if settings.data_file else None


def _load_from_disk():
    global _loaded
    if _loaded:
        return
    _loaded = True
    path = _data_file()
    if path is None or not path.exists():
        return
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    DOCUMENT["inventory"] = data.get("inventory", []) if isinstance(data, dict) else []
    logger.info("Loaded %d items from %s", len(DOCUMENT["inventory"]), path)


def _write_to_disk():
    path = _data_file()
    if path is None:
        return
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(DOCUMENT, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def read_document() -> Dict[str, Any]:
    _load_from_disk()
    return {"inventory": list(DOCUMENT["inventory"])}


async def replace_document(inventory) -> int:
    async with _LOCK:
        _load_from_disk()
        DOCUMENT["inventory"] = list(inventory)
        _write_to_disk()
    logger.info("Document replaced with %d items", len(inventory))
    return len(inventory)


async def reset_document():
    async with _LOCK:
        DOCUMENT["inventory"] = []
        _write_to_disk()
