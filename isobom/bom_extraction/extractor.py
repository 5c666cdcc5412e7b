from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from isobom import config
from isobom.models import BOMItem, RawBOMRecord
from isobom.bom_extraction.errors import InferenceFailure, MalformedResponse, MissingCredentials
from isobom.bom_extraction.normalization import normalize_records
from isobom.bom_extraction.prompts import BOM_EXTRACTION_PROMPT, BOM_RESPONSE_SCHEMA
from isobom.bom_extraction.segmenter import PageUnit, load_page_units, split_document

ProgressCallback = Callable[[str], None]


@lru_cache(maxsize=1)
def _client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def get_genai_client() -> genai.Client:
    """Shared Gemini client. Raises MissingCredentials when no key is configured."""
    if not config.GEMINI_API_KEY:
        raise MissingCredentials("GEMINI_API_KEY is not set (checked .env.local, .env and the environment).")
    return _client(config.GEMINI_API_KEY)


def parse_bom_response(text: Optional[str]) -> List[RawBOMRecord]:
    """Parse the model's JSON body into raw records (no cleaning)."""
    if not text:
        raise MalformedResponse("The model returned an empty response.")
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"The model did not return valid JSON: {e}") from e

    if not isinstance(payload, list):
        print("   ⚠️ AI response was not a JSON array, wrapping it.")
        payload = [payload]

    try:
        return [RawBOMRecord.model_validate(row) for row in payload]
    except ValidationError as e:
        raise MalformedResponse(f"The model returned rows that do not match the BOM schema: {e}") from e


class BOMExtractor:
    """
    Sends every page of one document to Gemini in a single request.

    One call per document (not per page) keeps latency and cost down; the
    prompt makes the model stamp each row with the drawing number of its own
    page, so documents holding several drawings still come out right.
    """

    def __init__(self, client: Optional[genai.Client] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or config.BOM_MODEL

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def extract(self, units: Sequence[PageUnit]) -> List[RawBOMRecord]:
        contents = [types.Part.from_text(text=BOM_EXTRACTION_PROMPT)]
        contents.extend(unit.to_part() for unit in units)
        generation_config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=BOM_RESPONSE_SCHEMA,
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=generation_config,
            )
        except MissingCredentials:
            raise
        except Exception as e:
            raise InferenceFailure(e) from e

        return parse_bom_response(response.text)


def _noop(_message: str) -> None:
    pass


async def _extract_units(
    units: Sequence[PageUnit],
    extractor: Optional[BOMExtractor],
    notify: ProgressCallback,
) -> List[BOMItem]:
    if extractor is None:
        extractor = BOMExtractor()

    notify("Sending document to AI for analysis...")
    raw_records = await extractor.extract(units)

    notify("Processing AI response and cleaning data...")
    items = normalize_records(raw_records)

    notify("Analysis complete.")
    return items


async def extract_bom_from_file(
    path: str | Path,
    extractor: Optional[BOMExtractor] = None,
    mime_type: Optional[str] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> List[BOMItem]:
    """
    Run the whole per-document pipeline: split -> one model call -> clean.

    Args:
        path: The drawing (PDF or image) on disk.
        extractor: Optional pre-built extractor (dependency injection).
                   If None, one is created with the shared Gemini client.
        mime_type: Declared media kind; guessed from the file name when omitted.
        on_progress: Optional observer for short status messages.
    """
    notify = on_progress or _noop
    notify("Splitting document into pages...")
    units = await load_page_units(path, mime_type)
    return await _extract_units(units, extractor, notify)


async def extract_bom_from_bytes(
    data: bytes,
    mime_type: Optional[str],
    extractor: Optional[BOMExtractor] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> List[BOMItem]:
    """Same as extract_bom_from_file, for an upload already held in memory."""
    notify = on_progress or _noop
    notify("Splitting document into pages...")
    units = await split_document(data, mime_type)
    return await _extract_units(units, extractor, notify)
