"""FastAPI entrypoint exposing BOM extraction and Excel export."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from isobom.config import CORS_ORIGINS
from isobom.bom_extraction.extractor import BOMExtractor
from isobom.routers import bom

app = FastAPI(title="Isometric BOM Extractor")

# Allow local frontend (Vite) to call the API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# The Gemini client is only created on the first request, so the API boots without a key.
app.state.bom_extractor = BOMExtractor()

app.include_router(bom.router)


@app.get("/health")
def service_health() -> dict:
    """Health check endpoint."""

    return {"status": "healthy", "message": "BOM extractor API is up and running"}

# Run with: uvicorn isobom.main:app --reload
