"""Tests for combined / per-file Excel export."""

import io
import zipfile

import pandas as pd
from openpyxl import load_workbook

from isobom.models import AnalyzedFile, BOMItem
from isobom.export.merger import (
    EXPORT_HEADERS,
    XLSX_MEDIA_TYPE,
    ZIP_MEDIA_TYPE,
    base_name,
    build_export,
    merge_tables,
    to_dataframe,
    unique_file_names,
    write_workbook,
)


def _file(name: str, count: int, drawing: str = "DWG") -> AnalyzedFile:
    items = [BOMItem(drawing_number=drawing, item_no=str(i + 1), name="PIPE", quantity=i + 1) for i in range(count)]
    return AnalyzedFile(file_name=name, bom_items=items)


class TestMergeTables:

    def test_single_file_combined_keeps_its_name(self):
        tables = merge_tables([_file("A-100.pdf", 4)], combine=True)
        assert len(tables) == 1
        assert tables[0].name == "A-100"
        assert tables[0].file_name == "A-100.xlsx"
        assert len(tables[0].items) == 4

    def test_several_files_combined_use_generic_name(self):
        tables = merge_tables([_file("A.pdf", 2, "A"), _file("B.pdf", 3, "B")], combine=True)
        assert len(tables) == 1
        assert tables[0].name == "bom-export"
        assert [i.drawing_number for i in tables[0].items] == ["A", "A", "B", "B", "B"]

    def test_only_contributing_files_count(self):
        tables = merge_tables([_file("A.pdf", 2), _file("empty.pdf", 0)], combine=True)
        assert tables[0].name == "A"

    def test_separate_tables(self):
        tables = merge_tables([_file("A.pdf", 2), _file("B.png", 1), _file("C.pdf", 0)], combine=False)
        assert [t.name for t in tables] == ["A", "B"]
        assert [len(t.items) for t in tables] == [2, 1]

    def test_nothing_to_export(self):
        assert merge_tables([_file("A.pdf", 0)], combine=True) == []
        assert merge_tables([], combine=False) == []

    def test_base_name(self):
        assert base_name("drawings/iso.v2.pdf") == "iso.v2"
        assert base_name("noext") == "noext"


class TestWorkbook:

    def test_columns_in_order(self):
        frame = to_dataframe(_file("A.pdf", 2).bom_items)
        assert list(frame.columns) == list(EXPORT_HEADERS.values())
        assert list(frame.columns)[:3] == ["図番", "No.", "名称"]
        assert list(frame["台数"]) == [1, 2]

    def test_write_and_read_back(self, tmp_path):
        path = write_workbook(_file("A.pdf", 3).bom_items, tmp_path / "A.xlsx")
        frame = pd.read_excel(path, sheet_name="BOM")
        assert list(frame.columns) == list(EXPORT_HEADERS.values())
        assert len(frame) == 3

    def test_column_widths_fit_content(self, tmp_path):
        items = [BOMItem(description="A VERY LONG DESCRIPTION")]
        path = write_workbook(items, tmp_path / "w.xlsx")
        sheet = load_workbook(path)["BOM"]
        assert sheet.column_dimensions["H"].width == len("A VERY LONG DESCRIPTION") + 1
        assert sheet.column_dimensions["B"].width == len("No.") + 1


class TestBuildExport:

    def test_nothing(self):
        assert build_export([_file("A.pdf", 0)], combine=True) is None

    def test_combined_workbook(self):
        artifact = build_export([_file("A.pdf", 2), _file("B.pdf", 2)], combine=True)
        assert artifact.file_name == "bom-export.xlsx"
        assert artifact.media_type == XLSX_MEDIA_TYPE
        frame = pd.read_excel(io.BytesIO(artifact.content), sheet_name="BOM")
        assert len(frame) == 4

    def test_separate_archive(self):
        artifact = build_export([_file("A.pdf", 2), _file("B.pdf", 1)], combine=False)
        assert artifact.file_name == "bom-exports.zip"
        assert artifact.media_type == ZIP_MEDIA_TYPE
        with zipfile.ZipFile(io.BytesIO(artifact.content)) as archive:
            assert archive.namelist() == ["A.xlsx", "B.xlsx"]
            frame = pd.read_excel(io.BytesIO(archive.read("A.xlsx")), sheet_name="BOM")
            assert len(frame) == 2

    def test_duplicate_names_in_archive(self):
        artifact = build_export([_file("A.pdf", 1), _file("A.png", 1)], combine=False)
        with zipfile.ZipFile(io.BytesIO(artifact.content)) as archive:
            assert archive.namelist() == ["A.xlsx", "A-2.xlsx"]

    def test_suffix_never_takes_a_real_stem(self):
        artifact = build_export([_file("A.pdf", 1), _file("A.png", 1), _file("A-2.pdf", 1)], combine=False)
        with zipfile.ZipFile(io.BytesIO(artifact.content)) as archive:
            names = archive.namelist()
        assert names == ["A.xlsx", "A-3.xlsx", "A-2.xlsx"]


class TestUniqueFileNames:

    def test_distinct_stems_unchanged(self):
        assert unique_file_names(["A", "B"]) == ["A.xlsx", "B.xlsx"]

    def test_repeated_stems(self):
        assert unique_file_names(["A", "A", "A"]) == ["A.xlsx", "A-2.xlsx", "A-3.xlsx"]

    def test_real_stem_seen_before_duplicate(self):
        assert unique_file_names(["A", "A-2", "A"]) == ["A.xlsx", "A-2.xlsx", "A-3.xlsx"]

    def test_case_insensitive(self):
        assert unique_file_names(["a", "A"]) == ["a.xlsx", "A-2.xlsx"]
