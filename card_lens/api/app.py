"""FastAPI application and routes."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from card_lens import __version__
from card_lens.config import ConfigLoader, ConfigLoadError
from card_lens.services.character_cards import (
    CardImporter,
    CardMetadataExtractor,
    CardRecord,
    ExtractionResult,
    ExtractionStatus,
)

logger = logging.getLogger(__name__)


# Global state
app_state = {
    "system_config": None,
    "extractor": None,
    "importer": None,
}


def get_extractor() -> CardMetadataExtractor:
    """Return the shared extractor, creating one with defaults if startup did not."""
    if app_state["extractor"] is None:
        app_state["extractor"] = CardMetadataExtractor()
    return app_state["extractor"]


def get_importer() -> CardImporter:
    if app_state["importer"] is None:
        app_state["importer"] = CardImporter(get_extractor())
    return app_state["importer"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting Card Lens...")

    try:
        loader = ConfigLoader()
        system_config = loader.load_system_config()
    except ConfigLoadError as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

    app_state["system_config"] = system_config
    app_state["extractor"] = CardMetadataExtractor(system_config.extractor)
    app_state["importer"] = CardImporter(app_state["extractor"])
    logger.info(
        f"✓ Extractor ready ({len(system_config.extractor.recognized_keywords)} card keywords)"
    )

    yield

    logger.info("Shutting down Card Lens...")
    app_state["extractor"] = None
    app_state["importer"] = None


app = FastAPI(
    title="Card Lens",
    description="Character card metadata extraction from PNG images",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


async def _read_upload(file: UploadFile) -> bytes:
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")
    return data


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Check service health."""
    return HealthResponse(status="ok", version=__version__)


@app.post("/cards/extract", response_model=ExtractionResult)
async def extract_card(file: UploadFile = File(...)):
    """
    Extract card metadata from an uploaded PNG.

    A PNG without a card is a normal response with status "not_found".
    """
    data = await _read_upload(file)
    result = await get_extractor().extract_async(data)

    if result.status == ExtractionStatus.NOT_CONTAINER_FORMAT:
        raise HTTPException(status_code=415, detail="Unsupported file: not a PNG image")

    logger.info(f"Extracted card from '{file.filename}': {result.status.value}")
    return result


@app.post("/cards/import", response_model=CardRecord)
async def import_card(file: UploadFile = File(...)):
    """Build a card record from an uploaded PNG."""
    data = await _read_upload(file)
    importer = get_importer()
    result = await importer.extractor.extract_async(data)

    if result.status == ExtractionStatus.NOT_CONTAINER_FORMAT:
        raise HTTPException(status_code=415, detail="Unsupported file: not a PNG image")
    if not result.found:
        raise HTTPException(status_code=404, detail="No character card data found in PNG")

    record = importer.build_record(result.metadata, file.filename)
    logger.info(f"Imported card '{record.title}' from '{file.filename}'")
    return record
