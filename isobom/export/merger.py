"""Turn analysed files into Excel workbooks (one combined, or one per drawing file)."""
from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set

import pandas as pd
from openpyxl.utils import get_column_letter

from isobom.config import COMBINED_EXPORT_NAME, EXPORT_ARCHIVE_NAME, EXPORT_SHEET_NAME
from isobom.models import BOM_FIELDS, AnalyzedFile, BOMItem

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ZIP_MEDIA_TYPE = "application/zip"

# Column headers as they appear on the drawings' BOM tables.
EXPORT_HEADERS = {
    "drawing_number": "図番",
    "item_no": "No.",
    "name": "名称",
    "size": "サイズ",
    "length": "長さ",
    "unit": "単位",
    "model_type": "型式",
    "description": "説明",
    "material": "材質",
    "standard": "規格",
    "quantity": "台数",
    "remarks": "注記",
}


@dataclass
class NamedTable:
    name: str
    items: List[BOMItem] = field(default_factory=list)

    @property
    def file_name(self) -> str:
        return f"{self.name}.xlsx"


@dataclass
class ExportArtifact:
    file_name: str
    content: bytes
    media_type: str


def base_name(file_name: str) -> str:
    """'drawings/A-100.pdf' -> 'A-100'."""
    return Path(file_name).stem


def merge_tables(files: Iterable[AnalyzedFile], combine: bool) -> List[NamedTable]:
    """
    Reshape per-file results into named tables. Files without items are ignored.

    combine=True  -> a single table, named after the only contributing file,
                     or the generic combined name when several contribute.
    combine=False -> one table per contributing file.
    """
    contributing = [f for f in files if f.bom_items]
    if not contributing:
        return []

    if not combine:
        return [NamedTable(base_name(f.file_name), list(f.bom_items)) for f in contributing]

    name = base_name(contributing[0].file_name) if len(contributing) == 1 else COMBINED_EXPORT_NAME
    items = [item for f in contributing for item in f.bom_items]
    return [NamedTable(name, items)]


def to_dataframe(items: Iterable[BOMItem]) -> pd.DataFrame:
    rows = [item.model_dump() for item in items]
    frame = pd.DataFrame(rows, columns=list(BOM_FIELDS))
    return frame.rename(columns=EXPORT_HEADERS)


def _fit_columns(worksheet, frame: pd.DataFrame) -> None:
    for idx, column in enumerate(frame.columns, start=1):
        cells = ["" if value is None else str(value) for value in frame[column]]
        width = max([len(str(column))] + [len(c) for c in cells]) + 1
        worksheet.column_dimensions[get_column_letter(idx)].width = width


def workbook_bytes(items: Iterable[BOMItem]) -> bytes:
    frame = to_dataframe(items)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
        _fit_columns(writer.sheets[EXPORT_SHEET_NAME], frame)
    return buffer.getvalue()


def write_workbook(items: Iterable[BOMItem], path: str | Path) -> Path:
    path = Path(path)
    path.write_bytes(workbook_bytes(items))
    return path


def unique_file_names(stems: Iterable[str]) -> List[str]:
    """
    One workbook name per stem, none repeated: 'A' -> 'A.xlsx', a second 'A'
    -> 'A-2.xlsx'. A generated suffix never takes a name a later stem owns
    outright ('A', 'A', 'A-2' -> 'A.xlsx', 'A-3.xlsx', 'A-2.xlsx').
    """
    stems = list(stems)
    reserved = {f"{stem}.xlsx".casefold() for stem in stems}
    used: Set[str] = set()
    names = []
    for stem in stems:
        candidate = f"{stem}.xlsx"
        counter = 1
        while candidate.casefold() in used or (counter > 1 and candidate.casefold() in reserved):
            counter += 1
            candidate = f"{stem}-{counter}.xlsx"
        used.add(candidate.casefold())
        names.append(candidate)
    return names


def build_export(files: Iterable[AnalyzedFile], combine: bool) -> Optional[ExportArtifact]:
    """Build the downloadable export, or None when no file has any BOM items."""
    tables = merge_tables(files, combine)
    if not tables:
        return None

    if combine:
        table = tables[0]
        return ExportArtifact(table.file_name, workbook_bytes(table.items), XLSX_MEDIA_TYPE)

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for table, file_name in zip(tables, unique_file_names(t.name for t in tables)):
            archive.writestr(file_name, workbook_bytes(table.items))
    return ExportArtifact(EXPORT_ARCHIVE_NAME, buffer.getvalue(), ZIP_MEDIA_TYPE)
