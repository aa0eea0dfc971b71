"""Models describing a parsed spreadsheet upload."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class SheetInfo(BaseModel):
    """Lightweight metadata for one worksheet."""

    name: str
    row_count: int = Field(..., ge=0, description="Non-blank rows, header included.")
    column_count: int = Field(..., ge=0, description="Width of the sheet's first row.")


class FileImportSummary(BaseModel):
    total_rows: int
    total_sheets: int


class FileImportResult(BaseModel):
    """Row/column data of the first sheet plus metadata for every sheet."""

    file_name: str
    file_type: str
    sheets: List[SheetInfo] = Field(default_factory=list)
    main_data: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Data rows keyed positionally by ``headers``.",
    )
    headers: List[str] = Field(default_factory=list)
    summary: FileImportSummary


__all__ = ["FileImportResult", "FileImportSummary", "SheetInfo"]
