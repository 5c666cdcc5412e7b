"""Shared fixtures: in-memory PDFs and a stand-in for the Gemini client."""
import json
from types import SimpleNamespace
from typing import Callable, List, Optional

import fitz  # PyMuPDF
import pytest


def build_pdf(page_count: int) -> bytes:
    doc = fitz.open()
    for i in range(page_count):
        page = doc.new_page()
        page.insert_text((72, 72), f"DWG-{i + 1:03d}")
    data = doc.tobytes()
    doc.close()
    return data


def bom_row(**overrides) -> dict:
    row = {
        "drawingNumber": "DWG-001",
        "itemNo": "1",
        "name": "ELBOW",
        "size": "50A",
        "length": "",
        "unit": "",
        "modelType": "",
        "description": "",
        "material": "SGP",
        "standard": "JIS",
        "quantity": "1",
        "remarks": "",
    }
    row.update(overrides)
    return row


class FakeModels:
    """Mimics ``client.aio.models``; records every call."""

    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None,
                 responder: Optional[Callable[[list], str]] = None):
        self.text = text
        self.error = error
        self.responder = responder
        self.calls: List[dict] = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        if self.responder is not None:
            return SimpleNamespace(text=self.responder(contents))
        return SimpleNamespace(text=self.text)


class FakeGenAIClient:
    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None,
                 responder: Optional[Callable[[list], str]] = None):
        self.models = FakeModels(text=text, error=error, responder=responder)
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def pdf_bytes() -> Callable[[int], bytes]:
    return build_pdf


@pytest.fixture
def fake_client() -> Callable[..., FakeGenAIClient]:
    return FakeGenAIClient


@pytest.fixture
def rows_json() -> Callable[..., str]:
    def _dump(*rows: dict) -> str:
        return json.dumps(list(rows), ensure_ascii=False)
    return _dump
