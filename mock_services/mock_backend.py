"""
mock_backend.py — Combined Mock of the Hotel Backend

Serves the mock inventory and order endpoints under one base URL, the way the
real backend exposes them, so the console can run locally against it.

Port:
    Default: 8000 (HTTP), the console's default CONSOLE_API_BASE_URL
"""

import logging

from fastapi import FastAPI

from .mock_inventory_service import router as inventory_router
from .mock_order_service import router as order_router

app = FastAPI(title="Mock Hotel Backend")
app.include_router(inventory_router)
app.include_router(order_router)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
