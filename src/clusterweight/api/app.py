# src/clusterweight/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and mounts the routes.
Business logic lives in `clusterweight.api.routes` and `clusterweight.scoring`.

Run with: `uvicorn clusterweight.api.app:app`
"""

from __future__ import annotations

from fastapi import FastAPI

from clusterweight.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="ClusterWeight API", version="0.1.0")
app.include_router(router)
