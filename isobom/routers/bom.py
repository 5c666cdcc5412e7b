"""Endpoints for BOM-related workflows."""
import asyncio
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

from isobom.models import AnalyzedFile
from isobom.bom_extraction.errors import BOMExtractionError
from isobom.bom_extraction.extractor import BOMExtractor, extract_bom_from_bytes
from isobom.bom_extraction.models import BOMExportRequest, BOMExtractionResponse
from isobom.bom_extraction.segmenter import guess_media_kind, is_supported, validate_document
from isobom.export.merger import build_export

router = APIRouter(prefix="/bom", tags=["bom"])


def get_bom_extractor(request: Request) -> BOMExtractor:
    extractor = getattr(request.app.state, "bom_extractor", None)
    if extractor is None:
        raise RuntimeError("BOM extractor not initialized.")
    return extractor


def _media_kind(upload: UploadFile) -> str | None:
    # Browsers sometimes send application/octet-stream; fall back to the extension.
    if is_supported(upload.content_type):
        return upload.content_type
    return guess_media_kind(upload.filename or "") or upload.content_type


@router.post("/extract", response_model=BOMExtractionResponse)
async def extract_bom(
    files: List[UploadFile] = File(...),
    extractor: BOMExtractor = Depends(get_bom_extractor),
) -> BOMExtractionResponse:
    """Extract the BOM of every uploaded drawing (PDF up to 20 pages, or image)."""
    documents = []
    errors = []
    for upload in files:
        name = upload.filename or "upload"
        data = await upload.read()
        mime_type = _media_kind(upload)
        try:
            await asyncio.to_thread(validate_document, data, mime_type)
        except BOMExtractionError as e:
            errors.append(f"{name}: {e}")
            continue
        documents.append((name, data, mime_type))

    if errors:
        raise HTTPException(status_code=400, detail="\n".join(errors))

    try:
        results = await asyncio.gather(
            *(extract_bom_from_bytes(data, mime_type, extractor=extractor) for _, data, mime_type in documents)
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Extraction failed: {str(e)}")

    analyzed = [
        AnalyzedFile(file_name=name, bom_items=items)
        for (name, _, _), items in zip(documents, results)
    ]
    message = None
    if not any(f.bom_items for f in analyzed):
        message = "No Bill of Materials could be extracted from the document(s). Please try different drawings."
    return BOMExtractionResponse(files=analyzed, message=message)


@router.post("/export")
def export_bom(payload: BOMExportRequest) -> Response:
    """Download the analysed BOMs as one workbook, or as a zip of workbooks."""
    artifact = build_export(payload.files, payload.combine)
    if artifact is None:
        return Response(status_code=204)
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(artifact.file_name)}"},
    )
