# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from app.api import api_router
from app.data.database import Base, engine
from app.utils.logging import get_logger
from app.utils.retry import db_retry

# import wszystkich modeli przed create_all
from app.data import models  # noqa: F401

logger = get_logger(__name__)


@db_retry()
def init_db(bind=engine):
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables created")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Store Order Service",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )

    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
