# dripdesk_api/main.py
import logging

from fastapi import FastAPI

from .api import records
from .core.logging_config import setup_logging
from .storage.sqlite_store import get_store

app = FastAPI(
    title="DripDesk Record API",
    description="Collection-based record storage behind the DripDesk marketing portal.",
    version="1.0.0"
)

app.include_router(records.router, prefix="/api", tags=["Records"])


@app.on_event("startup")
def startup_event():
    """Configures logging and opens the record store."""
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Application startup sequence initiated.")
    get_store()
    logger.info("Application startup sequence completed.")


@app.on_event("shutdown")
def shutdown_event():
    logging.getLogger(__name__).info("Application shutdown sequence completed.")


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the DripDesk Record API. Visit /docs for API documentation."}
