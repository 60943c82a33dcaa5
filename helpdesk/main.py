from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from helpdesk.api.admin import router as admin_router
from helpdesk.api.deps import get_repositories
from helpdesk.api.routes import router as api_router
from helpdesk.api.staff import router as staff_router
from helpdesk.core.config import get_settings
from helpdesk.core.logging import setup_logging
from helpdesk.services.auth import seed_default_users
from helpdesk.services.db import init_db

settings = get_settings()
setup_logging(settings.logging.level)

app = FastAPI(title="School IT Helpdesk", version="0.1.0")

app.include_router(api_router)
app.include_router(staff_router)
app.include_router(admin_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    current = get_settings()
    if current.storage_backend == "sql":
        init_db()
    if current.seed_default_users:
        for repos in get_repositories():
            seed_default_users(repos.users)
    logger.info("Helpdesk started with {backend} storage", backend=current.storage_backend)
