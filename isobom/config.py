"""Application configuration and shared settings."""

import os
from dotenv import load_dotenv

# Batch runs keep their key in .env.local; a plain .env is picked up as well.
load_dotenv(".env.local")
load_dotenv()

# --- Gemini ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
BOM_MODEL = os.getenv("BOM_MODEL", "gemini-2.5-flash")

# --- Document limits ---
MAX_PDF_PAGES = 20

# --- Batch processing ---
# Files processed concurrently per group.
BATCH_SIZE = int(os.getenv("BOM_BATCH_SIZE", "5"))

# --- Export naming ---
COMBINED_EXPORT_NAME = "bom-export"
EXPORT_ARCHIVE_NAME = "bom-exports.zip"
EXPORT_SHEET_NAME = "BOM"

# --- HTTP API ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
