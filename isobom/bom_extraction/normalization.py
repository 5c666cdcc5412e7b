"""Deterministic clean-up of model output.

The prompt asks the model to follow the same rules, but it does not always
comply, so they are enforced here. Every rule is total: a value it does not
understand is left alone or replaced by a default, never raised on.

Order matters:
    1. length      -> number when the text is a plain number
    2. quantity    -> always an int (default 1)
    3. HEX         -> "HEX."
    4. SCRE / SCRD -> moved from model type into the description
    5. multi-word model type -> first word stays, the rest goes to the description
                                (MACH'N is protected); the kept word then
                                goes through 3 and 4 once more
"""
from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping, Union

from pydantic import BaseModel

from isobom.models import BOMItem, RawBOMRecord
from isobom.utils import parse_leading_int, parse_plain_number

THREAD_DESIGNATIONS = ("SCRE", "SCRD")
PROTECTED_MODEL_TYPE = "MACHN"  # canonical form of "MACH'N"

_APOSTROPHES_AND_SPACES = re.compile(r"['\s]")


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def coerce_length(value: str) -> Union[int, float, str]:
    text = value.strip()
    # "12." is a number; "N/A." stays exactly as written.
    number = parse_plain_number(text[:-1] if text.endswith(".") else text)
    return text if number is None else number


def coerce_quantity(value: str) -> int:
    text = value.strip()
    number = parse_plain_number(text)
    if number is not None:
        return int(number)
    prefix = parse_leading_int(text)
    return 1 if prefix is None else prefix


def canonicalize_hex(model_type: str) -> str:
    return "HEX." if model_type.upper() == "HEX" else model_type


def relocate_thread_designation(model_type: str, description: str) -> tuple[str, str]:
    """Move SCRE/SCRD out of the model type. Returns (model_type, description)."""
    token = model_type.upper()
    if token not in THREAD_DESIGNATIONS:
        return model_type, description
    if token not in description.upper():
        description = _join(model_type, description)
    return "", description


def split_model_type(model_type: str, description: str) -> tuple[str, str]:
    """Keep the first word of a multi-word model type, push the rest to the description."""
    text = model_type.strip()
    parts = text.split()
    if len(parts) < 2:
        return model_type, description
    if _APOSTROPHES_AND_SPACES.sub("", text).upper().startswith(PROTECTED_MODEL_TYPE):
        return model_type, description
    return parts[0], _join(description, " ".join(parts[1:]))


def normalize_record(record: Union[RawBOMRecord, BOMItem, Mapping[str, Any]]) -> BOMItem:
    """Apply the cleaning rules to one record and return a validated BOMItem."""
    if isinstance(record, BaseModel):
        record = record.model_dump()
    raw = RawBOMRecord.model_validate(record)

    model_type = canonicalize_hex(raw.model_type)
    model_type, description = relocate_thread_designation(model_type, raw.description)
    model_type, description = split_model_type(model_type, description)
    # The word kept by the split gets rules 3 and 4 too, so a second pass is a no-op.
    model_type = canonicalize_hex(model_type)
    model_type, description = relocate_thread_designation(model_type, description)

    return BOMItem(
        drawing_number=raw.drawing_number,
        item_no=raw.item_no,
        name=raw.name,
        size=raw.size,
        length=coerce_length(raw.length),
        unit=raw.unit,
        model_type=model_type,
        description=description,
        material=raw.material,
        standard=raw.standard,
        quantity=coerce_quantity(raw.quantity),
        remarks=raw.remarks,
    )


def normalize_records(records: Iterable[Union[RawBOMRecord, BOMItem, Mapping[str, Any]]]) -> List[BOMItem]:
    """One BOMItem per input record, same order. Nothing is dropped or merged."""
    return [normalize_record(r) for r in records]
