"""Pydantic models specific to the BOM extraction endpoints."""
from typing import List, Optional

from pydantic import BaseModel, Field

from isobom.models import AnalyzedFile


class BOMExtractionResponse(BaseModel):
    """Result of analysing one or more uploaded drawings."""
    files: List[AnalyzedFile] = Field(
        description="One entry per uploaded file, in upload order."
    )
    message: Optional[str] = Field(
        default=None,
        description="Set when no BOM could be extracted from any file.",
    )


class BOMExportRequest(BaseModel):
    """Previously analysed files to turn into Excel."""
    files: List[AnalyzedFile]
    combine: bool = Field(
        default=True,
        description="One workbook for everything, or a zip with one workbook per file.",
    )
