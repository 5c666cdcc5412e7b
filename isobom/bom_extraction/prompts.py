"""Prompt and response schema for BOM extraction.

Shared by the HTTP API and the batch processor so both send the same request.
"""
from google.genai import types

# (json field, column label shown to the model)
BOM_SCHEMA_FIELDS = (
    ("drawingNumber", "図番 (Drawing Number)"),
    ("itemNo", "No. (Item Number)"),
    ("name", "名称 (Name)"),
    ("size", "サイズ (Size)"),
    ("length", "長さ (Length). Extract as a string. If not present, return an empty string."),
    ("unit", "単位 (Unit)"),
    ("modelType", "型式 (Model/Type)"),
    ("description", "説明 (Description)"),
    ("material", "材質 (Material)"),
    ("standard", "規格 (Standard)"),
    ("quantity", "台数 (Quantity). Extract as a string. If not present, return an empty string."),
    ("remarks", "注記 (Remarks)"),
)

BOM_EXTRACTION_PROMPT = """Analyze all the provided pages from a pipe isometric drawing document.
The document may contain MULTIPLE DISTINCT DRAWINGS. Each drawing has its own unique drawing number ('図番') and its own Bill of Materials (BOM), which may span across pages.

Your task is to find all BOM items from all drawings and consolidate them into a single, comprehensive list.

Your output must be a single JSON array that strictly follows the provided schema.

CRITICAL INSTRUCTIONS:
1.  **MULTI-DRAWING DETECTION:** Be aware that one PDF can contain several different drawings.
2.  **CORRECT DRAWING NUMBER ASSIGNMENT:** For each BOM item you extract, you MUST assign it the specific drawing number ('図番') that belongs to its drawing. The drawing number is located in the title block of the corresponding drawing's page. Do NOT apply one drawing number to all items if multiple drawings exist. The revision number, labeled '訂番', must NOT be part of the drawing number.
3.  **CONSOLIDATE ALL ITEMS:** Combine all BOM items from every drawing into one final list.
4.  **STRICT DATA EXTRACTION:** If a value for a field is not explicitly present for an item, you MUST return an empty string "". Do not infer or copy data from other rows, especially 'length'.

RECAP OF EXTRACTION RULES:
-   IGNORE REVISION SYMBOLS (e.g., <A>).
-   'SCRE'/'SCRD' must be moved from '型式' (modelType) to '説明' (description).
-   PRESERVE EXACT TEXT for terms like "MACH'N" and "HEX.".
-   For GASKETS, move material codes like 'T#1050-CR' from '型式' to '材質' (material).
-   For 'パイプ' (Pipe) with 'SGP' material, '型式' should be blank.
-   ISOLATE SUMMARY ROWS: Extract rows like 'パイプ計' (Pipe Total), but DO NOT use their data to fill in values for other items. Each item is independent.

Extract the following fields for each item and return them as one complete JSON array:
- 図番 (drawingNumber)
- No. (itemNo)
- 名称 (name)
- サイズ (size)
- 長さ (length): Extract as a string. If blank, return "".
- 単位 (unit)
- 型式 (modelType)
- 説明 (description)
- 材質 (material)
- 規格 (standard)
- 台数 (quantity): Extract as a string. If blank, return "".
- 注記 (remarks)
"""

BOM_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            field: types.Schema(type=types.Type.STRING, description=label)
            for field, label in BOM_SCHEMA_FIELDS
        },
        required=[field for field, _ in BOM_SCHEMA_FIELDS],
    ),
)
