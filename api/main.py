import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import db
from users import repository as users_repository
from users import router as users_router
from users.dependencies import user_store_backend

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    backend = user_store_backend()
    logger.info("startup user_store_backend=%s", backend)
    if backend != "postgres":
        yield
        return

    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        await users_repository.ensure_schema()
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router.router, tags=["users"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "user directory api"}
