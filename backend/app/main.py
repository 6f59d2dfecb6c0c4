from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.config import settings
from app.services.employee_directory import employee_directory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await employee_directory.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeDirectory, continuing with in-memory records")
    yield
    await employee_directory.close()


app = FastAPI(
    title="HR Portal Org Chart API",
    description="Organization hierarchy and employee directory",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "HR Portal Org Chart API"}
