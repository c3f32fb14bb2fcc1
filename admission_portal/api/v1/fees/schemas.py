"""Fees schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from admission_portal.core.enums import FundType

SESSION_PATTERN = r"^(\d{4}-\d{4}|default)$"


class FeeHead(BaseModel):
    """One fee line item with an amount per class bucket (whole rupees)."""

    id: int = Field(..., ge=1)
    name_en: str = Field(..., min_length=1, max_length=100)
    name_hi: str = Field(..., min_length=1, max_length=100)
    fund_type: Optional[FundType] = Field(None, description="Set from the canonical table when omitted")
    class9: int = Field(0, ge=0)
    class10: int = Field(0, ge=0)
    class11ac: int = Field(0, ge=0, description="Class 11 arts & commerce")
    class11s: int = Field(0, ge=0, description="Class 11 science")
    class12ac: int = Field(0, ge=0, description="Class 12 arts & commerce")
    class12s: int = Field(0, ge=0, description="Class 12 science")


class FeeStructureSave(BaseModel):
    session: str = Field(..., pattern=SESSION_PATTERN, description='"2025-2026" or "default"')
    heads: List[FeeHead] = Field(..., min_length=1)


class FeeStructureResponse(BaseModel):
    school_code: str
    session: str
    heads: List[FeeHead]
    updated_at: Optional[datetime] = None


class FeeItem(BaseModel):
    id: int
    name_en: str
    name_hi: str
    fund_type: FundType
    amount: int
    is_exempted: bool = False


class FeeBreakdown(BaseModel):
    student_fund_items: List[FeeItem]
    development_fund_items: List[FeeItem]
    all_heads: List[FeeItem]
    student_fund_total: int
    development_fund_total: int
    total_fee: int
    is_exempt: bool
