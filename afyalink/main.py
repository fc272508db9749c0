# afyalink/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from afyalink.common.database.database import connect_to_db, create_tables, close_db_connection
from afyalink.common.config import settings
from afyalink.common.utils.exceptions import register_exception_handlers
from afyalink.router.routers import include_routers

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Lifespan context manager for startup and shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_to_db()
    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables()
    yield
    await close_db_connection()

# Initialize FastAPI app with lifespan manager
app = FastAPI(
    title="AfyaLink HMS API",
    description="Hospital management backend: patients, appointments, clinical notes and staff",
    version="1.0.0",
    lifespan=lifespan
)

# Middleware for CORS using allowed origins from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers from a separate file
include_routers(app)

# Root endpoint
@app.get("/")
async def root():
    return {"message": "AfyaLink HMS Backend is Running"}
