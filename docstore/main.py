# docstore/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from perla.config import settings, setup_logging
from perla.models import InventoryDocument
from .database import read_document, replace_document, reset_document

app = FastAPI(title="perla document store")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------
# Document endpoints
# ---------------------------
@app.get(settings.store_path)
async def get_document():
    return read_document()


@app.post(settings.store_path)
async def save_document(payload: InventoryDocument):
    count = await replace_document([item.to_wire() for item in payload.inventory])
    return {"status": "saved", "count": count}


# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    await reset_document()
    return {"status": "reset"}


if __name__ == "__main__":
    setup_logging()
    uvicorn.run("docstore.main:app", host="0.0.0.0", port=8085)
