from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from poolsnap.api.routers.pool_snapshot import router as pool_snapshot_router
from poolsnap.api.routers.quote_compare import router as quote_compare_router

app = FastAPI(title="Pool Snapshot API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pool_snapshot_router)
app.include_router(quote_compare_router)

